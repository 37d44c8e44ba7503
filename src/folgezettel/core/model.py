"""Value types passed between the engine and its adapters."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Cursor:
    line: int  # 0-based line number
    ch: int  # character offset within the line


@dataclass(frozen=True)
class LinkSpan:
    start: int  # offset of the opening "[["
    end: int  # exclusive; the cursor or just past "]]"


@dataclass(frozen=True)
class ListingEntry:
    path: str  # vault-relative, "/"-separated, e.g. "Zetteln/1a Title.md"
    label: str  # display name, e.g. "1a Title"
    is_folder: bool = False

    @property
    def folder(self) -> str:
        """Parent folder path, "" for entries at the vault root."""
        head, sep, _ = self.path.rpartition("/")
        return head if sep else ""
