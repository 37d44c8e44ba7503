"""Single-link aliasing: [[1a2 Title]] -> [[1a2 Title|1a2]]."""

from ..config import ZettelSettings
from ..core.grammar import resolve_grammar

OPEN = "[["
CLOSE = "]]"
ALIAS_SEP = "|"
SPECIAL_MARKERS = ("|", "#", "^")


def find_link_start(line: str, cursor_ch: int) -> int | None:
    """Offset of the nearest "[[" starting at or before ``cursor_ch``."""
    if cursor_ch < 0:
        return None
    idx = line.rfind(OPEN, 0, cursor_ch + len(OPEN))
    return idx if idx != -1 else None


def link_content(span_text: str) -> str | None:
    """Text between the opening marker and the first closing marker.

    Returns None when the span does not start with "[[" or the link is
    still open.
    """
    if not span_text.startswith(OPEN):
        return None
    close = span_text.find(CLOSE, len(OPEN))
    if close == -1:
        return None
    return span_text[len(OPEN):close]


def is_specialized(content: str) -> bool:
    """True for aliased, heading (#) or block (^) links."""
    return any(marker in content for marker in SPECIAL_MARKERS)


def format_link(
    line: str,
    start: int,
    end: int,
    settings: ZettelSettings,
) -> str | None:
    """Alias the link in ``line[start:end]`` with its leading identifier.

    Args:
        line: Full text of the line
        start: Offset of the opening "[[" of the link
        end: End of the span (cursor position, or just past "]]")
        settings: Current settings snapshot; the id grammar is resolved
            from it on every call

    Returns:
        The rewritten line, or None when the line should be left as is
    """
    span = line[start:end]

    # Never override an explicit alias.
    if ALIAS_SEP in span:
        return None

    content = link_content(span)
    if content is None:
        return None

    ident = resolve_grammar(settings).match_prefix(content)
    if ident is None:
        return None

    if is_specialized(content):
        return None

    link_end = start + len(OPEN) + len(content) + len(CLOSE)
    replacement = f"{OPEN}{content}{ALIAS_SEP}{ident}{CLOSE}"
    return line[:start] + replacement + line[link_end:]
