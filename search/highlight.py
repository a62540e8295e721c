"""HTML-safe highlighting of search matches."""

from typing import Optional

from search.compiler import CompiledPattern
from logger import get_logger

logger = get_logger()

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text) -> str:
    """Escape ``& < > " '`` for safe interpolation into HTML.

    Non-string input yields an empty string.
    """
    if not isinstance(text, str):
        return ""
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def _wrap(match) -> str:
    matched = match.group(0)
    return f"<mark>{matched}</mark>" if matched else matched


def highlight_matches(text, compiled: Optional[CompiledPattern]) -> str:
    """Escape ``text`` and wrap pattern matches in ``<mark>`` tags.

    The text is escaped before matching, so only the ``<mark>`` markup is
    ever unescaped. Without a pattern, or when matching fails or times
    out, the escaped text is returned unmarked.
    """
    escaped = escape_html(text)
    if compiled is None or not isinstance(text, str) or not text:
        return escaped

    try:
        return compiled.sub(_wrap, escaped)
    except Exception as e:
        logger.warning(f"Highlight failed for {compiled.display_pattern}: {e}")
        return escaped


_TERMINAL_MARK = ("\033[7m", "\033[0m")


def highlight_terminal(text, compiled: Optional[CompiledPattern]) -> str:
    """Wrap matches in reverse-video escape codes for console output.

    Unlike ``highlight_matches`` the text is not HTML-escaped.
    """
    if not isinstance(text, str):
        return ""
    if compiled is None or not text:
        return text

    start, end = _TERMINAL_MARK
    try:
        return compiled.sub(
            lambda m: f"{start}{m.group(0)}{end}" if m.group(0) else "", text
        )
    except Exception as e:
        logger.warning(f"Highlight failed for {compiled.display_pattern}: {e}")
        return text
