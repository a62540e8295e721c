from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
import random
import string
import time

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Generate an opaque transaction id like ``txn_1727254800000_k3j9x0abc``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"txn_{int(time.time() * 1000)}_{suffix}"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


@dataclass
class Transaction:
    id: str  # opaque, immutable after creation
    description: str
    amount: Decimal  # at most 2 fractional digits
    category: str
    date: date
    created_at: str = field(default_factory=utc_timestamp)
    updated_at: str = ""

    def __post_init__(self):
        if not self.updated_at:
            self.updated_at = self.created_at

    @classmethod
    def create(
        cls,
        description: str,
        amount: Decimal,
        category: str,
        transaction_date: date,
        transaction_id: str = None,
    ) -> "Transaction":
        """Create a new Transaction with a generated id and fresh timestamps."""
        now = utc_timestamp()
        return cls(
            id=transaction_id or generate_id(),
            description=description,
            amount=amount,
            category=category,
            date=transaction_date,
            created_at=now,
            updated_at=now,
        )

    @property
    def amount_text(self) -> str:
        """Amount rendered as plain decimal text, e.g. ``12.50``."""
        return f"{self.amount:.2f}"

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build a Transaction from its serialized (camelCase) form.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If the date cannot be parsed.
            decimal.InvalidOperation: If the amount is not numeric.
        """
        created_at = data.get("createdAt") or utc_timestamp()
        return cls(
            id=str(data["id"]),
            description=data["description"],
            amount=Decimal(str(data["amount"])).quantize(Decimal("0.01")),
            category=data["category"],
            date=date.fromisoformat(data["date"]),
            created_at=created_at,
            updated_at=data.get("updatedAt") or created_at,
        )

    def to_dict(self) -> dict:
        """Convert transaction to its serialized (camelCase) form."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": float(self.amount),
            "category": self.category,
            "date": self.date.isoformat(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
