"""Transaction service: CRUD, sorting and filtering over the working set."""

from collections.abc import Mapping
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import List, Optional

from models.result import Err, Ok, Result
from models.transaction import Transaction, utc_timestamp
from models.working_set import WorkingSet
from validators import TRANSACTION_FIELDS, validate_transaction
from logger import get_logger

logger = get_logger()

SORT_FIELDS = {
    "date": lambda t: t.date,
    "amount": lambda t: t.amount,
    "description": lambda t: t.description.lower(),
    "category": lambda t: t.category.lower(),
    "createdAt": lambda t: t.created_at,
    "updatedAt": lambda t: t.updated_at,
}


class TransactionService:
    """Service for managing transactions in the working set.

    Every successful mutation is followed by a save request to storage.
    Failed operations leave the working set untouched.
    """

    def __init__(self, working_set: WorkingSet, storage=None):
        """Initialize the transaction service.

        Args:
            working_set: The session's working set.
            storage: Optional StorageService used to persist changes.
        """
        self.working_set = working_set
        self.storage = storage

    def find_all(self) -> List[Transaction]:
        """Get all transactions in insertion order (a new list)."""
        return list(self.working_set.transactions)

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID, or None if not found."""
        for transaction in self.working_set.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def create(self, data: Mapping, *, today: Optional[date] = None) -> Result:
        """Validate user input and add it as a new transaction.

        Args:
            data: Raw field values: description, amount, category, date.
            today: Reference day for the date range check.

        Returns:
            Ok(Transaction) with generated id and timestamps, or Err with
            reason ``invalid_transaction``, ``unknown_category`` or
            ``duplicate_id``.
        """
        validation = validate_transaction(data, today=today)
        if not validation.ok:
            return validation

        values = validation.value
        if values["category"] not in self.working_set.categories:
            return Err(
                "unknown_category",
                f"Category '{values['category']}' does not exist.",
            )

        transaction = Transaction.create(
            description=values["description"],
            amount=values["amount"],
            category=values["category"],
            transaction_date=values["date"],
        )
        return self.add(transaction)

    def add(self, transaction: Transaction) -> Result:
        """Add an already-built transaction.

        Returns:
            Ok(Transaction) or Err("duplicate_id").
        """
        if self.find(transaction.id) is not None:
            return Err(
                "duplicate_id", f"Transaction ID {transaction.id} already exists."
            )

        self.working_set.transactions.append(transaction)
        logger.debug(f"Added transaction {transaction.id}")
        self._persist()
        return Ok(transaction)

    def update(
        self, transaction_id: str, changes: Mapping, *, today: Optional[date] = None
    ) -> Result:
        """Update description, amount, category and/or date of a transaction.

        The id and creation timestamp never change; ``updated_at`` is refreshed.

        Returns:
            Ok(updated Transaction) or Err with reason ``not_found``,
            ``invalid_transaction`` or ``unknown_category``.
        """
        index = self._index_of(transaction_id)
        if index is None:
            return Err("not_found", f"Transaction {transaction_id} not found.")

        current = self.working_set.transactions[index]
        candidate = {
            "description": current.description,
            "amount": current.amount,
            "category": current.category,
            "date": current.date,
        }
        candidate.update(
            {key: value for key, value in changes.items() if key in TRANSACTION_FIELDS}
        )

        validation = validate_transaction(candidate, today=today)
        if not validation.ok:
            return validation

        values = validation.value
        if values["category"] not in self.working_set.categories:
            return Err(
                "unknown_category",
                f"Category '{values['category']}' does not exist.",
            )

        updated = replace(
            current,
            description=values["description"],
            amount=values["amount"],
            category=values["category"],
            date=values["date"],
            updated_at=utc_timestamp(),
        )
        self.working_set.transactions[index] = updated
        logger.debug(f"Updated transaction {transaction_id}")
        self._persist()
        return Ok(updated)

    def delete(self, transaction_id: str) -> Result:
        """Delete a transaction by ID.

        Returns:
            Ok(deleted Transaction) or Err("not_found").
        """
        index = self._index_of(transaction_id)
        if index is None:
            return Err("not_found", f"Transaction {transaction_id} not found.")

        removed = self.working_set.transactions.pop(index)
        logger.debug(f"Deleted transaction {transaction_id}")
        self._persist()
        return Ok(removed)

    def set_all(self, transactions: List[Transaction]) -> None:
        """Replace every transaction in the working set."""
        self.working_set.transactions = list(transactions)
        self._persist()

    def sorted(self, field: str = "date", direction: str = "desc") -> List[Transaction]:
        """Transactions sorted by a field.

        Args:
            field: One of date, amount, description, category, createdAt,
                   updatedAt. Unknown fields keep insertion order.
            direction: "asc" or "desc".
        """
        transactions = self.find_all()
        key = SORT_FIELDS.get(field)
        if key is None:
            return transactions
        return sorted(transactions, key=key, reverse=(direction == "desc"))

    def filtered(
        self,
        *,
        category: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        search_term: Optional[str] = None,
    ) -> List[Transaction]:
        """Transactions matching every given criterion.

        ``category="all"`` disables the category filter; ``search_term`` is a
        case-insensitive substring test on the description.
        """
        transactions = self.find_all()

        if category and category != "all":
            transactions = [t for t in transactions if t.category == category]
        if date_from is not None:
            transactions = [t for t in transactions if t.date >= date_from]
        if date_to is not None:
            transactions = [t for t in transactions if t.date <= date_to]
        if min_amount is not None:
            transactions = [t for t in transactions if t.amount >= min_amount]
        if max_amount is not None:
            transactions = [t for t in transactions if t.amount <= max_amount]
        if search_term:
            term = search_term.lower()
            transactions = [t for t in transactions if term in t.description.lower()]

        return transactions

    def summary(self) -> dict:
        """Counts, totals, date range and last update time of the working set."""
        transactions = self.working_set.transactions

        date_range = None
        last_updated = None
        if transactions:
            earliest = min(t.date for t in transactions)
            latest = max(t.date for t in transactions)
            date_range = {
                "earliest": earliest.isoformat(),
                "latest": latest.isoformat(),
                "day_span": (latest - earliest).days + 1,
            }
            last_updated = max(t.updated_at or t.created_at for t in transactions)

        return {
            "transaction_count": len(transactions),
            "category_count": len(self.working_set.categories),
            "has_budget_cap": self.working_set.budget_cap is not None,
            "total_spending": sum((t.amount for t in transactions), Decimal("0")),
            "date_range": date_range,
            "last_updated": last_updated,
        }

    def _index_of(self, transaction_id: str) -> Optional[int]:
        for index, transaction in enumerate(self.working_set.transactions):
            if transaction.id == transaction_id:
                return index
        return None

    def _persist(self) -> None:
        if self.storage is not None and not self.storage.save(
            self.working_set.transactions
        ):
            logger.warning("Transactions changed in memory but could not be saved")
