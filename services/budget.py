"""Budget service for the monthly spending cap."""

from datetime import datetime
from typing import Optional

from models.result import Err, Ok, Result
from models.working_set import WorkingSet
from tools.statistics import budget_view
from logger import get_logger

logger = get_logger()


class BudgetService:
    """Service for managing the optional monthly budget cap."""

    def __init__(self, working_set: WorkingSet, storage=None):
        self.working_set = working_set
        self.storage = storage

    def get(self) -> Optional[float]:
        return self.working_set.budget_cap

    def set(self, cap) -> Result:
        """Set the cap to a non-negative number, or None to remove it.

        Returns:
            Ok(cap) or Err("invalid_budget_cap").
        """
        if cap is not None:
            if isinstance(cap, bool) or not isinstance(cap, (int, float)) or cap < 0:
                return Err(
                    "invalid_budget_cap",
                    "Budget cap must be a non-negative number or empty.",
                )
            cap = float(cap)

        self.working_set.budget_cap = cap
        logger.debug(f"Budget cap set to {cap}")
        if self.storage is not None and not self.storage.save_budget_cap(cap):
            logger.warning("Budget cap changed in memory but could not be saved")
        return Ok(cap)

    def clear(self) -> Result:
        return self.set(None)

    def view(self, now: Optional[datetime] = None) -> Optional[dict]:
        """Spent, remaining and percentage for the current month, or None."""
        return budget_view(self.working_set.transactions, self.get(), now)
