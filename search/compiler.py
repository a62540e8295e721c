"""Compilation of user-typed search patterns into bounded matchers.

Patterns may be typed bare (``coffee|tea``) or self-delimited with flags
(``/coffee|tea/i``). Compilation uses the ``regex`` engine, which supports
lookbehind, backreferences and a per-call timeout.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

import regex

from models.result import Err, Ok, Result
from logger import get_logger

logger = get_logger()

# "g" and "u" do not change how the pattern compiles: "g" asks the
# highlighter for every match instead of the first, Unicode is the default.
FLAG_VALUES = {
    "g": 0,
    "i": regex.IGNORECASE,
    "m": regex.MULTILINE,
    "s": regex.DOTALL,
    "u": 0,
}

DEFAULT_MAX_LENGTH = 500
DEFAULT_TIMEOUT = 0.25


@dataclass(frozen=True)
class CompiledPattern:
    """A compiled search pattern with its canonical body and flags.

    Python patterns keep no scan position between calls, so every
    ``test`` or ``sub`` is an independent scan from the start of the text.
    """

    pattern: str
    flags: str
    compiled: regex.Pattern
    timeout: Optional[float] = DEFAULT_TIMEOUT

    @property
    def is_global(self) -> bool:
        return "g" in self.flags

    @property
    def display_pattern(self) -> str:
        return f"/{self.pattern}/i" if "i" in self.flags else f"/{self.pattern}/"

    def test(self, text) -> bool:
        """Whether the pattern matches anywhere in ``text``.

        Non-string input and scans that exceed the timeout count as no match.
        """
        if not isinstance(text, str):
            return False
        try:
            return self.compiled.search(text, timeout=self.timeout) is not None
        except TimeoutError:
            logger.warning(f"Pattern {self.display_pattern} timed out; treating as no match")
            return False

    def sub(self, repl: Union[str, Callable], text: str) -> str:
        """Replace matches in ``text``: all of them if global, else the first.

        Raises:
            TimeoutError: If the scan exceeds the timeout.
        """
        count = 0 if self.is_global else 1
        return self.compiled.sub(repl, text, count=count, timeout=self.timeout)


def split_delimited(raw: str, default_flags: str) -> Result:
    """Split a raw query into its pattern body and flags.

    ``/body/flags`` uses the text between the first and the last slash as
    the body and any trailing characters as a flags override. A body that
    ends in ``/`` with no flags after the closing delimiter (``/a//``)
    cannot be told apart from a missing delimiter and is rejected. An
    escaped trailing slash (``/a\\//``) is not ambiguous.

    Returns:
        Ok((body, flags)) or Err("ambiguous_delimiter").
    """
    text = raw.strip()
    last_slash = text.rfind("/")
    if not text.startswith("/") or last_slash <= 0:
        return Ok((text, default_flags))

    body = text[1:last_slash]
    suffix = text[last_slash + 1:]
    # A slash preceded by an odd run of backslashes is escaped
    backslashes = len(body[:-1]) - len(body[:-1].rstrip("\\"))
    if not suffix and body.endswith("/") and backslashes % 2 == 0:
        return Err(
            "ambiguous_delimiter",
            "Pattern ends with '/' and has no flags; escape it as '\\/' "
            "or add flags after the closing '/'.",
            {"pattern": text},
        )

    return Ok((body, suffix or default_flags))


def parse_flags(flags: str) -> Result:
    """Convert a flags string like "gi" into ``regex`` flag bits.

    Returns:
        Ok(int) or Err("invalid_flags") for unknown or repeated flags.
    """
    value = 0
    for flag in flags:
        if flag not in FLAG_VALUES:
            return Err(
                "invalid_flags",
                f"Unsupported flag '{flag}'. Use any of: g, i, m, s, u.",
                {"flags": flags},
            )
        value |= FLAG_VALUES[flag]

    if len(set(flags)) != len(flags):
        return Err("invalid_flags", f"Repeated flag in '{flags}'.", {"flags": flags})

    return Ok(value)


class PatternCompiler:
    """Turns raw search strings into CompiledPattern objects.

    Remembers the last successfully compiled pattern and flags so callers
    can re-apply them, e.g. to re-highlight results.

    Args:
        max_length: Longest pattern body accepted.
        timeout: Seconds allowed for a single scan of one field.
    """

    def __init__(
        self,
        max_length: int = DEFAULT_MAX_LENGTH,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.max_length = max_length
        self.timeout = timeout
        self.last_pattern = ""
        self.last_flags = "i"

    def compile(self, raw, default_flags: str = "gi") -> Result:
        """Compile a raw search string.

        Args:
            raw: Pattern as typed, optionally in ``/body/flags`` form.
            default_flags: Flags used when the string carries none.

        Returns:
            Ok(CompiledPattern) or Err with reason one of ``invalid_type``,
            ``ambiguous_delimiter``, ``empty_pattern``, ``too_long``,
            ``invalid_flags``, ``invalid_pattern``.
        """
        if not isinstance(raw, str):
            return Err("invalid_type", "Pattern must be text.")

        split = split_delimited(raw, default_flags)
        if not split.ok:
            return split
        body, flags = split.value

        if not body:
            return Err("empty_pattern", "Pattern is empty.")
        if len(body) > self.max_length:
            return Err(
                "too_long",
                f"Pattern is longer than {self.max_length} characters.",
            )

        flag_result = parse_flags(flags)
        if not flag_result.ok:
            return flag_result

        try:
            compiled = regex.compile(body, flag_result.value)
        except regex.error as e:
            logger.debug(f"Pattern {body!r} failed to compile: {e}")
            return Err("invalid_pattern", f"Invalid pattern: {e}", {"error": str(e)})

        self.last_pattern = body
        self.last_flags = flags

        return Ok(CompiledPattern(body, flags, compiled, self.timeout))

    def last_used(self) -> Tuple[str, str]:
        """The most recently compiled (pattern, flags) pair."""
        return self.last_pattern, self.last_flags
