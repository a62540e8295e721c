"""Loading of the curated pattern catalog."""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from models.search import Suggestion
from logger import get_logger

logger = get_logger()


class CatalogLoader:
    """Loads named pattern sections from the YAML catalog."""

    def __init__(self, catalog_path: Optional[Path] = None):
        """Initialize the catalog loader.

        Args:
            catalog_path: Path to the catalog YAML file.
                         Defaults to search/catalog.yaml in the project.
        """
        if catalog_path is None:
            self.catalog_path = Path(__file__).parent / "catalog.yaml"
        else:
            self.catalog_path = catalog_path

        self._data: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """Load the whole catalog, caching it after the first read.

        Raises:
            FileNotFoundError: If the catalog file doesn't exist.
            yaml.YAMLError: If YAML is invalid.
        """
        if self._data is not None:
            return self._data

        if not self.catalog_path.exists():
            raise FileNotFoundError(f"Pattern catalog not found: {self.catalog_path}")

        logger.debug(f"Loading pattern catalog from {self.catalog_path}")

        with open(self.catalog_path, "r") as f:
            self._data = yaml.safe_load(f) or {}

        return self._data

    def section(self, name: str, *, advanced: bool = False) -> List[Suggestion]:
        """Get one section of the catalog as Suggestion objects.

        Args:
            name: Section key, e.g. "quick_patterns".
            advanced: Mark every suggestion in the section as advanced.

        Returns:
            List of suggestions in file order (empty if the section is absent).
        """
        entries = self.load().get(name) or []
        return [
            Suggestion(
                name=entry["name"],
                pattern=entry["pattern"],
                flags=entry.get("flags", "g"),
                description=entry.get("description", ""),
                advanced=advanced,
            )
            for entry in entries
        ]

    def tutorial(self) -> Dict[str, Dict[str, str]]:
        """Get the regex tutorial (basics, advanced and examples)."""
        tutorial = self.load().get("tutorial") or {}
        return {key: dict(value) for key, value in tutorial.items()}
