"""Search engine: query compilation, filtering, history and pattern catalogs."""

from datetime import date
from typing import Dict, List, Optional

from models.result import Err, Ok, Result
from models.search import SearchHistoryEntry, Suggestion
from models.transaction import utc_timestamp
from search.catalog import CatalogLoader
from search.compiler import PatternCompiler
from search.matcher import matches
from search.suggestions import build_suggestions, common_words, word_frequency
from logger import get_logger

logger = get_logger()

DEFAULT_HISTORY_SIZE = 10
VALIDATION_SAMPLE = "Sample test text 123 $45.67"

# Error categories, each with the lower-cased message fragments that
# identify it, and the hint shown to the user.
PATTERN_HINTS = (
    (
        ("invalid character class", "character set", "character range"),
        "Check character classes like [a-z] for proper syntax",
    ),
    (
        ("unterminated group", "missing )", "unbalanced parenthesis", "unterminated subpattern"),
        "Make sure all parentheses are properly closed",
    ),
    (
        ("invalid escape sequence", "bad escape", "incomplete escape"),
        "Use double backslashes for literal backslashes",
    ),
    (
        ("invalid group", "unknown extension", "unknown group", "bad group", "group name"),
        "Check that capture groups are properly formed",
    ),
    (
        ("invalid quantifier", "nothing to repeat", "multiple repeat", "bad repeat"),
        "Quantifiers like *, +, ? must follow a character or group",
    ),
)
DEFAULT_HINT = "Check regex syntax and try a simpler pattern"


def pattern_hint(error_message: str) -> str:
    """Map a compile error message to a targeted suggestion."""
    lowered = error_message.lower()
    for fragments, hint in PATTERN_HINTS:
        if any(fragment in lowered for fragment in fragments):
            return hint
    return DEFAULT_HINT


class SearchEngine:
    """Regex search over transactions with a bounded most-recent-first history.

    Safe to call on every keystroke: compilation and filtering are
    synchronous and a new call simply supersedes the previous result.

    Args:
        compiler: Pattern compiler to use (a default one if None).
        catalog: Pattern catalog loader (the bundled catalog if None).
        history_size: Maximum number of history entries kept.
    """

    def __init__(
        self,
        compiler: Optional[PatternCompiler] = None,
        catalog: Optional[CatalogLoader] = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        self.compiler = compiler or PatternCompiler()
        self.catalog = catalog or CatalogLoader()
        self.history_size = history_size
        self._history: List[SearchHistoryEntry] = []
        self.last_compiled = None

    def search(self, transactions, query, case_insensitive: bool = True) -> Result:
        """Filter transactions whose description, category, amount or date match.

        Args:
            transactions: Records to search (Transaction objects or dicts).
            query: Pattern text, bare or in ``/body/flags`` form.
            case_insensitive: Default to flags "gi" instead of "g".

        Returns:
            Ok(list of matching records in their original order); the input
            list itself for a blank query. Err("search_failed") if the
            pattern does not compile; history is left untouched then.
        """
        if not isinstance(query, str) or not query.strip():
            return Ok(transactions)

        flags = "gi" if case_insensitive else "g"
        compiled_result = self.compiler.compile(query, flags)
        if not compiled_result.ok:
            logger.warning(f"Search failed for {query!r}: {compiled_result.message}")
            return Err(
                "search_failed",
                f"Search failed: {compiled_result.message}",
                {"cause": compiled_result},
            )

        compiled = compiled_result.value
        self.last_compiled = compiled
        self._add_to_history(compiled.pattern, compiled.flags)

        matched = [record for record in transactions if matches(compiled, record)]
        logger.debug(
            f"Search {compiled.display_pattern} matched {len(matched)}/{len(transactions)}"
        )
        return Ok(matched)

    def _add_to_history(self, pattern: str, flags: str) -> None:
        entry = SearchHistoryEntry(
            pattern=pattern,
            flags=flags,
            timestamp=utc_timestamp(),
            display_pattern=f"/{pattern}/i" if "i" in flags else f"/{pattern}/",
        )
        history = [
            existing
            for existing in self._history
            if existing.pattern != pattern or existing.flags != flags
        ]
        history.insert(0, entry)
        self._history = history[: self.history_size]

    def get_history(self) -> List[SearchHistoryEntry]:
        """Search history, most recent first. Returns a copy."""
        return list(self._history)

    def clear_history(self) -> None:
        self._history = []

    def quick_patterns(self) -> Dict[str, Suggestion]:
        """Fixed named patterns available regardless of the data."""
        return {s.name: s for s in self.catalog.section("quick_patterns")}

    def suggestions(
        self, transactions, today: Optional[date] = None
    ) -> Dict[str, List[Suggestion]]:
        """Pattern suggestions derived from the given transactions.

        Returns:
            Dict with keys amounts, dates, descriptions, categories, advanced.
        """
        return build_suggestions(transactions, self.catalog, today)

    def word_frequency(self, transactions):
        return word_frequency(transactions)

    def common_words(self, transactions, limit: int = 10) -> List[str]:
        return common_words(transactions, limit)

    def regex_tutorial(self) -> Dict[str, Dict[str, str]]:
        return self.catalog.tutorial()

    def validate_pattern(self, pattern, flags: str = "i") -> Result:
        """Check that a pattern compiles and can be run.

        Returns:
            Ok(CompiledPattern), or Err whose ``details["suggestion"]``
            holds a hint for fixing the pattern.
        """
        result = self.compiler.compile(pattern, flags)
        if not result.ok:
            error = result.details.get("error", result.message)
            return Err(
                result.reason,
                result.message,
                {"error": error, "suggestion": pattern_hint(error)},
            )

        result.value.test(VALIDATION_SAMPLE)
        return result
