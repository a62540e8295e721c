"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from models.working_set import WorkingSet


class Services:
    """Container for all application services.

    Owns the session's working set and hands it to every service, so
    there is exactly one in-memory copy of the data per container.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored
                    for database access.
        working_set: Optional preloaded working set. If None, it is loaded from storage.
    """

    def __init__(self, config: Config, db_manager=None, working_set: WorkingSet = None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.storage import StorageService
        from services.transactions import TransactionService
        from services.categories import CategoryService
        from services.budget import BudgetService
        from services.data import DataService
        from search.compiler import PatternCompiler
        from search.engine import SearchEngine

        self.storage = StorageService(self.db_manager)
        if working_set is None:
            working_set = self.storage.load_working_set()
        self.working_set = working_set

        self.transactions = TransactionService(self.working_set, self.storage)
        self.categories = CategoryService(self.working_set, self.storage)
        self.budget = BudgetService(self.working_set, self.storage)
        self.data = DataService(self.working_set, self.storage)
        self.search = SearchEngine(
            PatternCompiler(
                max_length=config.search_max_pattern_length,
                timeout=config.search_timeout,
            ),
            history_size=config.search_history_size,
        )
