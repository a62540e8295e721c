"""In-memory working set owned by a single session."""

from dataclasses import dataclass, field
from typing import List, Optional

from models.settings import Settings
from models.transaction import Transaction

DEFAULT_CATEGORIES = ["Food", "Books", "Transport", "Entertainment", "Fees", "Other"]


@dataclass
class WorkingSet:
    """All entities for the current session.

    Created once per process and handed to services through their
    constructors. Categories keep insertion order.
    """

    transactions: List[Transaction] = field(default_factory=list)
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    budget_cap: Optional[float] = None
    settings: Settings = field(default_factory=Settings)

    def reset(self) -> None:
        """Restore the empty, freshly seeded state."""
        self.transactions = []
        self.categories = list(DEFAULT_CATEGORIES)
        self.budget_cap = None
        self.settings = Settings()
