"""Structural validation for transaction fields and bulk import payloads.

Every validator returns a tagged result (``Ok``/``Err``) with a
machine-checkable ``reason`` so the caller can render field-specific
messages. Expected failures never raise.
"""

import functools
import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from models.result import Err, Ok, Result
from models.settings import Settings
from logger import get_logger

logger = get_logger()

MAX_DESCRIPTION_LENGTH = 200
MAX_AMOUNT = Decimal("1000000")
MAX_AGE_YEARS = 10

DESCRIPTION_PATTERN = re.compile(r"^\S(?:.*\S)?$")
DUPLICATE_WORD_PATTERN = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)
AMOUNT_PATTERN = re.compile(r"^(0|[1-9]\d*)(\.\d{1,2})?$")
LEADING_ZEROS_PATTERN = re.compile(r"^0+(?=\d)")
DATE_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")
CATEGORY_PATTERN = re.compile(r"^[A-Za-z]+(?:[ -][A-Za-z]+)*$")
CATEGORY_INVALID_CHAR = re.compile(r"[^A-Za-z \-]")

IMPORT_KEYS = ("transactions", "categories", "settings", "budgetCap")
TRANSACTION_FIELDS = ("description", "amount", "category", "date")


def _guarded(func):
    """Convert unexpected faults inside a validator into a generic failure."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}")
            return Err("internal_error", "Validation failed unexpectedly.")

    return wrapper


@_guarded
def validate_description(text) -> Result:
    """Validate a transaction description.

    Returns:
        Ok(description) or Err with reason one of ``invalid_type``,
        ``empty``, ``too_long``, ``whitespace``, ``duplicate_word``.
    """
    if not isinstance(text, str):
        return Err("invalid_type", "Description must be text.")
    if not text.strip():
        return Err("empty", "Description is required.")
    if len(text) > MAX_DESCRIPTION_LENGTH:
        return Err(
            "too_long",
            f"Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer.",
        )
    if not DESCRIPTION_PATTERN.match(text):
        return Err("whitespace", "Description cannot start or end with a space.")

    match = DUPLICATE_WORD_PATTERN.search(text)
    if match:
        duplicate = match.group(0)
        return Err(
            "duplicate_word",
            f'Description contains a repeated word: "{duplicate}".',
            {"duplicate": duplicate},
        )

    return Ok(text)


def _amount_text(value) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (int, float)):
        return repr(value) if isinstance(value, float) else str(value)
    return None


@_guarded
def validate_amount(value) -> Result:
    """Validate an amount given as a string or number.

    Accepts digits with an optional ``.`` and 1-2 fractional digits.
    Redundant leading zeros are collapsed first (``007.50`` -> ``7.50``).

    Returns:
        Ok(Decimal) quantized to cents, or Err with reason one of
        ``invalid_type``, ``malformed``, ``too_small``, ``too_large``.
    """
    text = _amount_text(value)
    if text is None:
        return Err("invalid_type", "Amount must be a number.")

    text = LEADING_ZEROS_PATTERN.sub("", text)
    if not AMOUNT_PATTERN.match(text):
        return Err("malformed", "Enter a valid amount (e.g. 15.50).")

    amount = Decimal(text)
    if amount <= 0:
        return Err("too_small", "Amount must be greater than 0.")
    if amount >= MAX_AMOUNT:
        return Err("too_large", "Amount must be less than 1,000,000.")

    return Ok(amount.quantize(Decimal("0.01")))


@_guarded
def validate_date(
    value, *, today: Optional[date] = None, enforce_range: bool = True
) -> Result:
    """Validate a ``YYYY-MM-DD`` date.

    Args:
        value: Date string (or a date object).
        today: Reference day; defaults to the current local date.
        enforce_range: When False (import/load mode) only the format and
            calendar validity are checked.

    Returns:
        Ok(date) or Err with reason one of ``invalid_type``, ``malformed``,
        ``invalid_date``, ``future``, ``too_old``.
    """
    if isinstance(value, date):
        value = value.isoformat()
    if not isinstance(value, str):
        return Err("invalid_type", "Date must be text in YYYY-MM-DD format.")

    text = value.strip()
    if not DATE_PATTERN.match(text):
        return Err("malformed", "Enter a valid date in YYYY-MM-DD format.")

    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        return Err("invalid_date", f"{text} is not a real calendar date.")

    if enforce_range:
        today = today or date.today()
        if parsed > today:
            return Err("future", "Date cannot be in the future.")
        if parsed < today - relativedelta(years=MAX_AGE_YEARS):
            return Err(
                "too_old", f"Date cannot be more than {MAX_AGE_YEARS} years ago."
            )

    return Ok(parsed)


@_guarded
def validate_category(value) -> Result:
    """Validate a category name.

    Letters only, with single spaces or hyphens between letter runs.

    Returns:
        Ok(trimmed name) or Err with reason one of ``invalid_type``,
        ``empty``, ``invalid_characters``, ``malformed``.
    """
    if not isinstance(value, str):
        return Err("invalid_type", "Category must be text.")

    name = value.strip()
    if not name:
        return Err("empty", "Category is required.")

    bad = CATEGORY_INVALID_CHAR.search(name)
    if bad:
        return Err(
            "invalid_characters",
            "Category should only contain letters, spaces and hyphens.",
            {"character": bad.group(0)},
        )
    if not CATEGORY_PATTERN.match(name):
        return Err(
            "malformed",
            "Category words must be separated by a single space or hyphen.",
        )

    return Ok(name)


def _get_field(candidate, name):
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


@_guarded
def validate_transaction(
    candidate, *, today: Optional[date] = None, enforce_range: bool = True
) -> Result:
    """Validate all fields of a candidate transaction.

    Every field is checked even when an earlier one fails.

    Args:
        candidate: Mapping or object with description, amount, category, date.
        today: Reference day for the date range check.
        enforce_range: Apply the future/too-old date policy.

    Returns:
        Ok(dict of cleaned values) or Err("invalid_transaction") whose
        ``details`` maps each failing field name to its Err.
    """
    results = {
        "description": validate_description(_get_field(candidate, "description")),
        "amount": validate_amount(_get_field(candidate, "amount")),
        "category": validate_category(_get_field(candidate, "category")),
        "date": validate_date(
            _get_field(candidate, "date"), today=today, enforce_range=enforce_range
        ),
    }

    errors = {name: result for name, result in results.items() if not result.ok}
    if errors:
        message = "; ".join(f"{name}: {err.message}" for name, err in errors.items())
        return Err("invalid_transaction", message, errors)

    return Ok({name: result.value for name, result in results.items()})


def is_storable(record) -> bool:
    """Check the format rules a record must meet to be kept on load/import.

    Only type, non-empty and grammar checks apply; description length,
    repeated words and the date range policy are not enforced here.
    """
    if not isinstance(record, Mapping):
        return False

    record_id = record.get("id")
    if not isinstance(record_id, str) or not record_id.strip():
        return False

    description = record.get("description")
    if not isinstance(description, str) or not DESCRIPTION_PATTERN.match(description):
        return False

    amount = record.get("amount")
    if isinstance(amount, bool):
        return False
    if isinstance(amount, (int, float)):
        if amount < 0:
            return False
    elif not isinstance(amount, str) or not AMOUNT_PATTERN.match(amount.strip()):
        return False

    category = record.get("category")
    if not isinstance(category, str) or not CATEGORY_PATTERN.match(category):
        return False

    return validate_date(record.get("date"), enforce_range=False).ok


def _validate_imported_transactions(transactions, errors) -> None:
    seen_ids = set()
    for position, record in enumerate(transactions, start=1):
        if not isinstance(record, Mapping):
            errors.append(f"Transaction {position}: must be an object")
            continue

        record_id = record.get("id")
        if not isinstance(record_id, str) or not record_id.strip():
            errors.append(f"Transaction {position}: missing id")
        elif record_id in seen_ids:
            errors.append(f"Transaction {position}: duplicate id {record_id}")
        else:
            seen_ids.add(record_id)

        result = validate_transaction(record, enforce_range=False)
        if not result.ok:
            errors.append(f"Transaction {position}: {result.message}")


@_guarded
def validate_import_data(payload) -> Result:
    """Validate a bulk import payload.

    The payload must contain at least one of ``transactions``,
    ``categories``, ``settings`` or ``budgetCap``; every section present
    must be valid. Historical transactions skip the date range policy.

    Returns:
        Ok(payload) or Err("invalid_import") with ``details["errors"]``
        listing each problem, positions 1-based.
    """
    if not isinstance(payload, Mapping):
        return Err(
            "invalid_structure",
            "Import data must be an object.",
            {"errors": ["Import data must be an object"]},
        )
    if not any(key in payload for key in IMPORT_KEYS):
        message = "Import data contains no transactions, categories, settings or budget cap"
        return Err("invalid_structure", message, {"errors": [message]})

    errors = []

    if "transactions" in payload:
        transactions = payload["transactions"]
        if not isinstance(transactions, list):
            errors.append("Transactions must be an array")
        else:
            _validate_imported_transactions(transactions, errors)

    if "categories" in payload:
        categories = payload["categories"]
        if not isinstance(categories, list):
            errors.append("Categories must be an array")
        else:
            for position, category in enumerate(categories, start=1):
                result = validate_category(category)
                if not result.ok:
                    errors.append(f"Category {position}: {result.message}")

    if "settings" in payload:
        settings = payload["settings"]
        if not isinstance(settings, Mapping):
            errors.append("Settings must be an object")
        else:
            try:
                Settings.model_validate(settings)
            except ValidationError as e:
                errors.append(f"Settings: {e.error_count()} invalid value(s)")

    if "budgetCap" in payload:
        cap = payload["budgetCap"]
        valid_number = isinstance(cap, (int, float)) and not isinstance(cap, bool)
        if cap is not None and not (valid_number and cap >= 0):
            errors.append("Budget cap must be a non-negative number or null")

    if errors:
        return Err("invalid_import", "; ".join(errors), {"errors": errors})

    return Ok(payload)
