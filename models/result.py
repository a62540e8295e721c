"""Tagged result types returned by validators, services and the search engine.

Expected failures (bad input, unknown ids, invalid patterns) are returned as
``Err`` values instead of being raised, so callers can branch on ``.ok``::

    result = validate_amount("12.50")
    if result.ok:
        amount = result.value
    else:
        print(result.message)
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying an optional value."""

    value: T = None
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    """Failed outcome.

    Attributes:
        reason: Machine-checkable failure code (e.g. "duplicate_word").
        message: Human-readable message suitable for display.
        details: Extra structured data, such as per-field errors.
    """

    reason: str
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    ok: ClassVar[bool] = False

    def __post_init__(self):
        if not self.message:
            object.__setattr__(self, "message", self.reason.replace("_", " "))


Result = Union[Ok, Err]
