"""Search history and pattern suggestion models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchHistoryEntry:
    """A successful search, most recent first in the history list.

    Attributes:
        pattern: Canonical pattern body (delimiters stripped).
        flags: Flags the pattern was compiled with, e.g. "gi".
        timestamp: ISO-8601 time the search was run.
        display_pattern: Pattern rendered as ``/body/i`` or ``/body/``.
    """

    pattern: str
    flags: str
    timestamp: str
    display_pattern: str


@dataclass(frozen=True)
class Suggestion:
    """A named pattern offered for one-click search."""

    name: str
    pattern: str
    flags: str
    description: str
    advanced: bool = False

    @property
    def query(self) -> str:
        """The pattern in self-delimited ``/body/flags`` form."""
        return f"/{self.pattern}/{self.flags}"
