"""Folder filtering for listing indentation."""

from collections.abc import Iterable


def normalize_path(path: str) -> str:
    """Normalise a vault-relative folder path for comparison.

    Backslashes become "/" and leading/trailing separators are dropped, so
    "Zetteln/", "/Zetteln" and "Zetteln" compare equal.
    """
    return path.replace("\\", "/").strip().strip("/")


def _clean(paths: Iterable[str]) -> list[str]:
    return [p for p in (normalize_path(p) for p in paths) if p]


def is_within(path: str, folder: str) -> bool:
    """True if ``path`` is ``folder`` or a descendant of it."""
    return path == folder or path.startswith(folder + "/")


def should_indent(path: str, include: Iterable[str], exclude: Iterable[str]) -> bool:
    """
    Decide whether entries of the folder at ``path`` are indented.

    Exclusion covers the folder and everything below it and always wins.
    A non-empty include list must name the folder exactly; sub-folders of
    an included folder are not included implicitly.
    """
    path = normalize_path(path)
    include_list = _clean(include)

    for folder in _clean(exclude):
        if is_within(path, folder):
            return False

    if include_list and path not in include_list:
        return False

    return True
