"""Data-driven search pattern suggestions.

Builds patterns from the current transactions: amount distribution,
the current year and month, description vocabulary and categories in use.
"""

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

import regex

from models.search import Suggestion
from search.catalog import CatalogLoader

_NON_WORD = regex.compile(r"[^\w\s]")
_MIN_WORD_LENGTH = 3


def greater_than_pattern(threshold: int) -> str:
    r"""Regex alternation matching whole numbers strictly greater than ``threshold``.

    For 42 this is ``[1-9]\d{2,}|[5-9]\d|4[3-9]``: three or more digits,
    two digits starting 5-9, or 43-49.
    """
    digits = str(max(threshold, 0))
    width = len(digits)
    alternatives = [rf"[1-9]\d{{{width},}}"]

    for position, digit in enumerate(digits):
        if digit == "9":
            continue
        prefix = digits[:position]
        remaining = width - position - 1
        lowest = int(digit) + 1
        digit_class = str(lowest) if lowest == 9 else f"[{lowest}-9]"
        tail = "" if remaining == 0 else (r"\d" if remaining == 1 else rf"\d{{{remaining}}}")
        alternatives.append(f"{prefix}{digit_class}{tail}")

    return "|".join(alternatives)


def _amount(record) -> Optional[Decimal]:
    value = getattr(record, "amount", None)
    if value is None and isinstance(record, dict):
        value = record.get("amount")
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float)):
        return None
    return Decimal(str(value))


def amount_patterns(transactions, catalog: CatalogLoader) -> List[Suggestion]:
    """Fixed amount patterns plus one "above average" pattern.

    The above-average pattern matches amounts whose whole-dollar part
    exceeds the whole-dollar part of the mean. It is omitted when there
    are no amounts to average.
    """
    suggestions = catalog.section("amount_patterns")

    amounts = [a for a in (_amount(t) for t in transactions) if a is not None]
    if amounts:
        average = sum(amounts) / len(amounts)
        whole = int(average)
        pattern = rf"(?<![\d.])(?:{greater_than_pattern(whole)})\.\d{{2}}\b"
        suggestions.append(
            Suggestion(
                name=f"Above average (>{average:.2f})",
                pattern=pattern,
                flags="g",
                description=f"Find transactions above average (${average:.2f})",
            )
        )

    return suggestions


def date_patterns(catalog: CatalogLoader, today: Optional[date] = None) -> List[Suggestion]:
    """Patterns for the current year and month, then fixed day-of-month patterns."""
    today = today or date.today()
    year = f"{today.year:04d}"
    month = f"{today.month:02d}"

    return [
        Suggestion(
            name="This year",
            pattern=rf"\b{year}-",
            flags="g",
            description=f"Find transactions from {year}",
        ),
        Suggestion(
            name="This month",
            pattern=rf"\b{year}-{month}-",
            flags="g",
            description="Find transactions from current month",
        ),
    ] + catalog.section("date_patterns")


def word_frequency(transactions) -> Counter:
    """Count description words: lower-cased, punctuation stripped, 3+ chars."""
    counts = Counter()
    for record in transactions:
        description = getattr(record, "description", None)
        if description is None and isinstance(record, dict):
            description = record.get("description")
        if not isinstance(description, str):
            continue

        cleaned = _NON_WORD.sub("", description.lower())
        counts.update(word for word in cleaned.split() if len(word) >= _MIN_WORD_LENGTH)
    return counts


def common_words(transactions, limit: int = 10) -> List[str]:
    """The most frequent description words, most common first."""
    return [word for word, _ in word_frequency(transactions).most_common(limit)]


def category_patterns(transactions) -> List[Suggestion]:
    """One exact-word pattern per distinct category in use, first-seen order."""
    seen: Dict[str, None] = {}
    for record in transactions:
        category = getattr(record, "category", None)
        if category is None and isinstance(record, dict):
            category = record.get("category")
        if isinstance(category, str) and category:
            seen.setdefault(category, None)

    return [
        Suggestion(
            name=f"Category: {category}",
            pattern=rf"\b{regex.escape(category)}\b",
            flags="gi",
            description=f"Find all {category} transactions",
        )
        for category in seen
    ]


def build_suggestions(
    transactions, catalog: CatalogLoader, today: Optional[date] = None
) -> Dict[str, List[Suggestion]]:
    """All suggestions grouped by kind."""
    return {
        "amounts": amount_patterns(transactions, catalog),
        "dates": date_patterns(catalog, today),
        "descriptions": catalog.section("description_patterns"),
        "categories": category_patterns(transactions),
        "advanced": catalog.section("advanced_patterns", advanced=True),
    }
