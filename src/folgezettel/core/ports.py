"""Protocols the host environment implements for the engine."""

from typing import Callable, Iterable, Protocol

from ..config import ZettelSettings
from .model import Cursor, ListingEntry


class EditorSurface(Protocol):
    """
    Line-oriented view of the note being edited. Mutating a line is expected
    to produce a change notification, exactly like user typing does.
    """

    def get_cursor(self) -> Cursor:
        pass

    def get_line(self, line: int) -> str:
        pass

    def set_line(self, line: int, text: str) -> None:
        pass


class ListingSurface(Protocol):
    """
    File listing shown next to the editor. Indentation is purely
    presentational: a class name applied to and cleared from an entry.
    """

    def list_entries(self) -> Iterable[ListingEntry]:
        pass

    def apply_indent_class(self, entry: ListingEntry, class_name: str) -> None:
        pass

    def clear_indent_class(self, entry: ListingEntry) -> None:
        pass


class SettingsStore(Protocol):
    """
    Persist settings on behalf of the host; load() merges stored values
    over the supplied defaults.
    """

    def load(self, defaults: ZettelSettings) -> ZettelSettings:
        pass

    def save(self, settings: ZettelSettings) -> None:
        pass


SettingsProvider = Callable[[], ZettelSettings]
