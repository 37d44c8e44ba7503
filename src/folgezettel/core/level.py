"""Hierarchy level of a folgezettel-numbered name."""

import re

# Leading id only: "1", "1a2", "1-4a1". The title that follows is ignored.
LEADING_ID_RE = re.compile(r"^\d+[A-Za-z0-9]*(?:-[A-Za-z0-9]+)*", re.ASCII)


def leading_id(name: str) -> str | None:
    m = LEADING_ID_RE.match(name)
    return m.group(0) if m else None


def compute_level(name: str) -> int:
    """
    Compute the nesting depth encoded in the id at the start of ``name``.

    Every dash opens a branch (one level) and every switch between a run of
    digits and a run of letters inside a segment descends one more level.

    Examples:
        >>> compute_level("1 Title")
        0
        >>> compute_level("1a1 Title")
        2
        >>> compute_level("1-4a1 Title")
        3
        >>> compute_level("Inbox")
        0
    """
    ident = leading_id(name)
    if ident is None:
        return 0

    segments = ident.split("-")
    level = len(segments) - 1

    for segment in segments:
        prev: bool | None = None
        for ch in segment:
            is_digit = ch.isdigit()
            if prev is not None and is_digit != prev:
                level += 1
            prev = is_digit

    return level
