"""Link aliasing for folgezettel notes."""

from .alias import find_link_start, format_link, is_specialized, link_content
from .formatter import AliasResult, alias_file, alias_line, alias_text

__all__ = [
    "find_link_start",
    "format_link",
    "is_specialized",
    "link_content",
    "alias_line",
    "alias_text",
    "alias_file",
    "AliasResult",
]
