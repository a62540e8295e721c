"""Helper utilities for tests."""

from datetime import date
from decimal import Decimal
from pathlib import Path
import sqlite3

from models.transaction import Transaction


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    migration_files = sorted(migrations_dir.glob("*.sql"))

    for migration_file in migration_files:
        with open(migration_file, "r") as f:
            sql = f.read()

        conn.executescript(sql)

    conn.commit()


def make_transaction(
    description="Lunch at cafeteria",
    amount="12.50",
    category="Food",
    transaction_date="2025-09-25",
    transaction_id=None,
) -> Transaction:
    """Build a Transaction without going through validation."""
    return Transaction.create(
        description=description,
        amount=Decimal(amount),
        category=category,
        transaction_date=date.fromisoformat(transaction_date),
        transaction_id=transaction_id,
    )


def transaction_record(**overrides) -> dict:
    """A serialized transaction record as found in exports."""
    record = {
        "id": "txn_1727254800000_abc123xyz",
        "description": "Lunch at cafeteria",
        "amount": 12.5,
        "category": "Food",
        "date": "2025-09-25",
        "createdAt": "2025-09-25T10:00:00.000+00:00",
        "updatedAt": "2025-09-25T10:00:00.000+00:00",
    }
    record.update(overrides)
    return record
