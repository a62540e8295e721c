"""Category service for the working set's category list."""

from typing import List

from models.result import Err, Ok, Result
from models.working_set import DEFAULT_CATEGORIES, WorkingSet
from validators import validate_category
from logger import get_logger

logger = get_logger()


class CategoryService:
    """Service for managing categories.

    Categories are unique names kept in insertion order.
    """

    def __init__(self, working_set: WorkingSet, storage=None):
        """Initialize the category service.

        Args:
            working_set: The session's working set.
            storage: Optional StorageService used to persist changes.
        """
        self.working_set = working_set
        self.storage = storage

    def find_all(self) -> List[str]:
        """Get all category names in insertion order (a new list)."""
        return list(self.working_set.categories)

    def add(self, name) -> Result:
        """Add a new category.

        Returns:
            Ok(trimmed name), or Err from category validation or
            Err("duplicate_category").
        """
        validation = validate_category(name)
        if not validation.ok:
            return validation

        name = validation.value
        if name in self.working_set.categories:
            return Err("duplicate_category", f"Category '{name}' already exists.")

        self.working_set.categories.append(name)
        logger.debug(f"Added category {name}")
        self._persist()
        return Ok(name)

    def remove(self, name: str) -> Result:
        """Remove a category that no transaction uses.

        Returns:
            Ok(name) or Err with reason ``not_found``, ``in_use`` or
            ``last_category``.
        """
        if name not in self.working_set.categories:
            return Err("not_found", f"Category '{name}' not found.")

        in_use = sum(1 for t in self.working_set.transactions if t.category == name)
        if in_use:
            return Err(
                "in_use",
                f"Cannot remove category '{name}': used by {in_use} transaction(s).",
                {"count": in_use},
            )
        if len(self.working_set.categories) == 1:
            return Err("last_category", "Cannot remove the last category.")

        self.working_set.categories.remove(name)
        logger.debug(f"Removed category {name}")
        self._persist()
        return Ok(name)

    def set_all(self, categories) -> List[str]:
        """Replace the category list.

        Non-text and blank entries are dropped and duplicates kept once,
        at their first position. Categories still used by a transaction
        are appended if missing. A list that would end up empty leaves
        the current categories unchanged.

        Returns:
            The stored category list.
        """
        names = {}
        for category in categories:
            if isinstance(category, str) and category.strip():
                names.setdefault(category.strip(), None)
        for transaction in self.working_set.transactions:
            names.setdefault(transaction.category, None)

        if not names:
            logger.warning("Refusing to replace categories with an empty list")
            return self.find_all()

        self.working_set.categories = list(names)
        self._persist()
        return self.find_all()

    def reset(self) -> List[str]:
        """Restore the default categories, keeping any still used by a transaction."""
        return self.set_all(DEFAULT_CATEGORIES)

    def _persist(self) -> None:
        if self.storage is not None and not self.storage.save_categories(
            self.working_set.categories
        ):
            logger.warning("Categories changed in memory but could not be saved")
