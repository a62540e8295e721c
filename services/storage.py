"""Storage service: the SQLite-backed system of record across sessions.

Loads never raise; a missing or damaged store yields empty data.
Saves report success as a boolean.
"""

import json
import sqlite3
from decimal import InvalidOperation
from typing import List, Optional

from pydantic import ValidationError

from models.settings import ExportSnapshot, Settings
from models.transaction import Transaction, utc_timestamp
from models.working_set import DEFAULT_CATEGORIES, WorkingSet
from validators import is_storable, validate_category
from logger import get_logger

logger = get_logger()

_TRANSACTION_FIELDS = """id, description, amount, category, transaction_date,
       created_at, updated_at"""

_PERSISTENCE_ERRORS = (sqlite3.Error, ValueError, TypeError, KeyError, InvalidOperation)

SETTINGS_KEY = "settings"
BUDGET_CAP_KEY = "budgetCap"


def records_to_transactions(records) -> List[Transaction]:
    """Convert serialized records, silently dropping any that fail format checks."""
    transactions = []
    for record in records:
        if not is_storable(record):
            continue
        try:
            transactions.append(Transaction.from_dict(record))
        except (KeyError, ValueError, InvalidOperation):
            continue

    dropped = len(records) - len(transactions)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed transaction record(s)")
    return transactions


def clean_categories(categories) -> List[str]:
    """Keep valid category names once each, in first-seen order."""
    names = {}
    for category in categories:
        result = validate_category(category)
        if result.ok:
            names.setdefault(result.value, None)
    return list(names)


class StorageService:
    """Persists the working set's entities.

    Args:
        db_manager: Database manager instance for database operations.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    # Transactions

    def load(self) -> List[Transaction]:
        """Load all stored transactions in saved order.

        Rows that fail the structural format checks are dropped.
        Returns an empty list if the store is missing or unreadable.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    f"SELECT {_TRANSACTION_FIELDS} FROM transactions ORDER BY position"
                )
                rows = cursor.fetchall()
            return records_to_transactions([self._row_to_record(row) for row in rows])
        except _PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to load transactions: {e}")
            return []

    def save(self, transactions: List[Transaction]) -> bool:
        """Replace all stored transactions with the given list."""
        try:
            with self.db_manager.connect() as conn:
                self._write_transactions(conn, transactions)
                conn.commit()
            return True
        except _PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to save transactions: {e}")
            return False

    # Categories

    def load_categories(self) -> List[str]:
        """Load stored categories in order; empty if none or unreadable."""
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute("SELECT name FROM categories ORDER BY position")
                return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"Failed to load categories: {e}")
            return []

    def save_categories(self, categories: List[str]) -> bool:
        try:
            with self.db_manager.connect() as conn:
                self._write_categories(conn, categories)
                conn.commit()
            return True
        except sqlite3.Error as e:
            logger.error(f"Failed to save categories: {e}")
            return False

    # Settings and budget cap

    def load_settings(self) -> Settings:
        """Load settings, falling back to defaults when absent or invalid."""
        value = self._load_value(SETTINGS_KEY)
        if value is None:
            return Settings()
        try:
            return Settings.model_validate(value)
        except ValidationError as e:
            logger.error(f"Stored settings are invalid, using defaults: {e}")
            return Settings()

    def save_settings(self, settings: Settings) -> bool:
        return self._save_value(SETTINGS_KEY, settings.model_dump(by_alias=True))

    def load_budget_cap(self) -> Optional[float]:
        value = self._load_value(BUDGET_CAP_KEY)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            return None
        return float(value)

    def save_budget_cap(self, cap: Optional[float]) -> bool:
        return self._save_value(BUDGET_CAP_KEY, cap)

    def load_working_set(self) -> WorkingSet:
        """Build a working set from everything in the store."""
        return WorkingSet(
            transactions=self.load(),
            categories=self.load_categories() or list(DEFAULT_CATEGORIES),
            budget_cap=self.load_budget_cap(),
            settings=self.load_settings(),
        )

    # Whole-store operations

    def clear(self) -> bool:
        """Delete all stored data."""
        try:
            with self.db_manager.connect() as conn:
                conn.execute("DELETE FROM transactions")
                conn.execute("DELETE FROM categories")
                conn.execute("DELETE FROM settings")
                conn.commit()
            return True
        except sqlite3.Error as e:
            logger.error(f"Failed to clear storage: {e}")
            return False

    def export_all(self) -> dict:
        """Snapshot of everything stored, in the interchange format."""
        snapshot = ExportSnapshot(
            transactions=[t.to_dict() for t in self.load()],
            categories=self.load_categories() or list(DEFAULT_CATEGORIES),
            settings=self.load_settings(),
            budget_cap=self.load_budget_cap(),
            export_date=utc_timestamp(),
        )
        return snapshot.model_dump(by_alias=True)

    def import_all(self, snapshot: dict) -> bool:
        """Write a snapshot's sections to the store, all or nothing.

        Sections absent from the snapshot are left as they are. If any
        write fails, the store is rolled back to its pre-import state.
        """
        try:
            with self.db_manager.connect() as conn:
                try:
                    if "transactions" in snapshot:
                        transactions = records_to_transactions(snapshot["transactions"])
                        self._write_transactions(conn, transactions)
                    if "categories" in snapshot:
                        self._write_categories(
                            conn, clean_categories(snapshot["categories"])
                        )
                    if "settings" in snapshot:
                        settings = Settings.model_validate(snapshot["settings"])
                        self._write_value(
                            conn, SETTINGS_KEY, settings.model_dump(by_alias=True)
                        )
                    if "budgetCap" in snapshot:
                        self._write_value(conn, BUDGET_CAP_KEY, snapshot["budgetCap"])
                    conn.commit()
                except (*_PERSISTENCE_ERRORS, ValidationError) as e:
                    conn.rollback()
                    logger.error(f"Import failed, restored previous data: {e}")
                    return False
            return True
        except sqlite3.Error as e:
            logger.error(f"Import failed, could not open storage: {e}")
            return False

    # Internal helpers

    def _write_transactions(self, conn, transactions: List[Transaction]) -> None:
        conn.execute("DELETE FROM transactions")
        conn.executemany(
            f"""
            INSERT INTO transactions ({_TRANSACTION_FIELDS}, position)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    t.id,
                    t.description,
                    t.amount_text,
                    t.category,
                    t.date.isoformat(),
                    t.created_at,
                    t.updated_at,
                    position,
                )
                for position, t in enumerate(transactions)
            ],
        )

    def _write_categories(self, conn, categories: List[str]) -> None:
        conn.execute("DELETE FROM categories")
        conn.executemany(
            "INSERT INTO categories (name, position) VALUES (?, ?)",
            [(name, position) for position, name in enumerate(categories)],
        )

    def _write_value(self, conn, key: str, value) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, json.dumps(value)),
        )

    def _load_value(self, key: str):
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute("SELECT value FROM settings WHERE key = ?", (key,))
                row = cursor.fetchone()
            return json.loads(row[0]) if row else None
        except (sqlite3.Error, ValueError) as e:
            logger.error(f"Failed to load {key}: {e}")
            return None

    def _save_value(self, key: str, value) -> bool:
        try:
            with self.db_manager.connect() as conn:
                self._write_value(conn, key, value)
                conn.commit()
            return True
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error(f"Failed to save {key}: {e}")
            return False

    def _row_to_record(self, row: tuple) -> dict:
        """Convert a database row to the serialized transaction form."""
        return {
            "id": row[0],
            "description": row[1],
            "amount": row[2],
            "category": row[3],
            "date": row[4],
            "createdAt": row[5],
            "updatedAt": row[6],
        }
