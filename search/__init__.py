from search.compiler import CompiledPattern, PatternCompiler
from search.engine import SearchEngine
from search.highlight import escape_html, highlight_matches, highlight_terminal

__all__ = [
    "CompiledPattern",
    "PatternCompiler",
    "SearchEngine",
    "escape_html",
    "highlight_matches",
    "highlight_terminal",
]
