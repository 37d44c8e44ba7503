from os.path import commonprefix
from typing import Callable

from ..core.model import Cursor
from ..core.ports import EditorSurface

ChangeListener = Callable[[], None]
PasteListener = Callable[[str], None]


class InMemoryEditor(EditorSurface):
    """
    Editor surface backed by a list of lines.

    Every mutation, including set_line, notifies change listeners
    synchronously, the way a live editor emits change events for
    programmatic edits too.
    """

    def __init__(self, text: str = "", cursor: Cursor | None = None):
        self.lines = text.split("\n")
        self.cursor = cursor or Cursor(0, 0)
        self.change_listeners: list[ChangeListener] = []
        self.paste_listeners: list[PasteListener] = []

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def on_change(self, listener: ChangeListener) -> None:
        self.change_listeners.append(listener)

    def on_paste(self, listener: PasteListener) -> None:
        self.paste_listeners.append(listener)

    def get_cursor(self) -> Cursor:
        return self.cursor

    def set_cursor(self, line: int, ch: int) -> None:
        self.cursor = Cursor(line, max(0, min(ch, len(self.lines[line]))))

    def get_line(self, line: int) -> str:
        return self.lines[line]

    def set_line(self, line: int, text: str) -> None:
        old = self.lines[line]
        self.lines[line] = text
        if self.cursor.line == line:
            # Keep the cursor attached to the text after the edited region.
            prefix = len(commonprefix([old, text]))
            if self.cursor.ch > prefix:
                self.set_cursor(line, self.cursor.ch + len(text) - len(old))
            else:
                self.set_cursor(line, self.cursor.ch)
        self._emit_change()

    def type_text(self, text: str) -> None:
        """Insert single-line text at the cursor, one change event per call."""
        self._insert(text)
        self._emit_change()

    def type_chars(self, text: str) -> None:
        """Insert text one character at a time, like keystrokes."""
        for ch in text:
            self.type_text(ch)

    def paste(self, text: str) -> None:
        """Insert clipboard text, then notify paste and change listeners."""
        self._insert(text)
        for listener in list(self.paste_listeners):
            listener(text)
        self._emit_change()

    def _insert(self, text: str) -> None:
        if "\n" in text:
            raise ValueError("InMemoryEditor only inserts single-line text")
        line, ch = self.cursor.line, self.cursor.ch
        current = self.lines[line]
        self.lines[line] = current[:ch] + text + current[ch:]
        self.cursor = Cursor(line, ch + len(text))

    def _emit_change(self) -> None:
        for listener in list(self.change_listeners):
            listener()
