"""Per-record matching across the searchable transaction fields."""

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import List

from search.compiler import CompiledPattern

SEARCHABLE_FIELDS = ("description", "category", "amount", "date")


def _field_text(record, name):
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)

    if name == "amount" and isinstance(value, (Decimal, int, float)):
        if isinstance(value, bool):
            return None
        return f"{value:.2f}"
    if name == "date" and isinstance(value, date):
        return value.isoformat()
    return value


def searchable_fields(record) -> List:
    """Texts the search engine looks at for one record.

    Description, category, amount as plain text with two decimals
    (``12.50``) and ISO date. Missing or non-text values come back as-is
    and never match.
    """
    return [_field_text(record, name) for name in SEARCHABLE_FIELDS]


def matches(compiled: CompiledPattern, record) -> bool:
    """True if the pattern matches any searchable field of the record."""
    return any(compiled.test(text) for text in searchable_fields(record))
