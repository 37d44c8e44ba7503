"""Folgezettel indentation of a file listing."""

import logging

from .config import ZettelSettings
from .core.level import compute_level
from .core.paths import should_indent
from .core.ports import ListingSurface

logger = logging.getLogger(__name__)

MAX_INDENT_LEVEL = 10
INDENT_CLASS_PREFIX = "fz-indent-"


def indent_class(level: int) -> str:
    return f"{INDENT_CLASS_PREFIX}{min(level, MAX_INDENT_LEVEL)}"


def refresh_listing(listing: ListingSurface, settings: ZettelSettings) -> int:
    """
    Reapply indent classes to every entry of a listing.

    Previous classes are always cleared first, so turning indentation off
    or excluding a folder takes effect on the next refresh.

    Returns:
        Number of entries that received an indent class
    """
    indented = 0
    for entry in listing.list_entries():
        listing.clear_indent_class(entry)

        if not settings.enable_indentation or entry.is_folder:
            continue
        if not should_indent(entry.folder, settings.include_folders, settings.exclude_folders):
            continue

        level = compute_level(entry.label)
        if level <= 0:
            continue

        listing.apply_indent_class(entry, indent_class(level))
        indented += 1

    logger.debug("indented %d listing entries", indented)
    return indented
