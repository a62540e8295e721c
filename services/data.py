"""Data service: export, import and reset of the whole working set."""

from models.result import Err, Ok, Result
from models.settings import ExportSnapshot, Settings
from models.transaction import utc_timestamp
from models.working_set import WorkingSet
from services.storage import clean_categories, records_to_transactions
from validators import validate_import_data
from logger import get_logger

logger = get_logger()


class DataService:
    """Service for bulk operations on the working set and its storage."""

    def __init__(self, working_set: WorkingSet, storage=None):
        """Initialize the data service.

        Args:
            working_set: The session's working set.
            storage: Optional StorageService used to persist changes.
        """
        self.working_set = working_set
        self.storage = storage

    def export_snapshot(self) -> dict:
        """Snapshot of the working set in the interchange format.

        Example:
            {
                "transactions": [{"id": "txn_...", "amount": 12.5, ...}],
                "categories": ["Food", "Books"],
                "settings": {"baseCurrency": "USD", "exchangeRates": {...}, "theme": "light"},
                "budgetCap": 500.0,
                "exportDate": "2025-09-25T10:00:00.000+00:00",
                "version": "1.0",
            }
        """
        snapshot = ExportSnapshot(
            transactions=[t.to_dict() for t in self.working_set.transactions],
            categories=list(self.working_set.categories),
            settings=self.working_set.settings,
            budget_cap=self.working_set.budget_cap,
            export_date=utc_timestamp(),
        )
        return snapshot.model_dump(by_alias=True)

    def import_snapshot(self, payload) -> Result:
        """Replace the sections present in ``payload`` with its contents.

        The payload is validated first and rejected whole if anything is
        invalid. If storage fails part way, both the store and the working
        set are returned to their pre-import state.

        Returns:
            Ok(dict of imported counts) or Err with reason
            ``invalid_structure``, ``invalid_import`` or ``import_failed``.
        """
        validation = validate_import_data(payload)
        if not validation.ok:
            logger.warning(f"Rejected import: {validation.message}")
            return validation

        previous = WorkingSet(
            transactions=list(self.working_set.transactions),
            categories=list(self.working_set.categories),
            budget_cap=self.working_set.budget_cap,
            settings=self.working_set.settings,
        )

        if "transactions" in payload:
            self.working_set.transactions = records_to_transactions(
                payload["transactions"]
            )
            for transaction in self.working_set.transactions:
                if transaction.category not in self.working_set.categories:
                    self.working_set.categories.append(transaction.category)
        if "categories" in payload:
            categories = clean_categories(payload["categories"])
            for transaction in self.working_set.transactions:
                if transaction.category not in categories:
                    categories.append(transaction.category)
            self.working_set.categories = categories
        if "settings" in payload:
            self.working_set.settings = Settings.model_validate(payload["settings"])
        if "budgetCap" in payload:
            cap = payload["budgetCap"]
            self.working_set.budget_cap = float(cap) if cap is not None else None

        if self.storage is not None:
            stored = self.storage.import_all(
                {
                    "transactions": [t.to_dict() for t in self.working_set.transactions],
                    "categories": self.working_set.categories,
                    "settings": self.working_set.settings.model_dump(by_alias=True),
                    "budgetCap": self.working_set.budget_cap,
                }
            )
            if not stored:
                self._restore(previous)
                return Err("import_failed", "Import failed; previous data restored.")

        counts = {
            "transactions": len(self.working_set.transactions),
            "categories": len(self.working_set.categories),
        }
        logger.info(
            f"Imported {counts['transactions']} transaction(s) and "
            f"{counts['categories']} categories"
        )
        return Ok(counts)

    def clear_all(self) -> Result:
        """Reset the working set to its seeded defaults and clear storage."""
        self.working_set.reset()
        if self.storage is not None and not self.storage.clear():
            return Err("clear_failed", "Could not clear stored data.")
        return Ok()

    def _restore(self, previous: WorkingSet) -> None:
        self.working_set.transactions = previous.transactions
        self.working_set.categories = previous.categories
        self.working_set.budget_cap = previous.budget_cap
        self.working_set.settings = previous.settings
