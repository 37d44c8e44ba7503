"""Editor event handlers for link aliasing."""

import logging

from .core.model import LinkSpan
from .core.ports import EditorSurface, SettingsProvider
from .format.alias import CLOSE, OPEN, find_link_start, format_link, is_specialized

logger = logging.getLogger(__name__)


class LinkAliaser:
    """
    Rewrites links as they are pasted or typed into an editor.

    Rewriting a line makes the editor emit a change notification of its
    own. While a rewrite is in progress the aliaser is ``formatting`` and
    ignores change notifications, so it never reprocesses its own edit.
    """

    def __init__(self, editor: EditorSurface, settings: SettingsProvider):
        self.editor = editor
        self.settings = settings
        self._formatting = False

    @property
    def formatting(self) -> bool:
        return self._formatting

    def handle_paste(self, clipboard_text: str | None) -> bool:
        """Alias the link the cursor sits in after a paste containing "[["."""
        if not clipboard_text or OPEN not in clipboard_text:
            return False

        cursor = self.editor.get_cursor()
        line = self.editor.get_line(cursor.line)
        start = find_link_start(line, cursor.ch)
        if start is None:
            logger.debug("paste: no opening marker before cursor on line %d", cursor.line)
            return False

        return self._format(cursor.line, line, LinkSpan(start, cursor.ch))

    def handle_change(self) -> bool:
        """Alias a link that was just closed by typing "]]"."""
        if self._formatting:
            return False

        cursor = self.editor.get_cursor()
        line = self.editor.get_line(cursor.line)
        if not line[:cursor.ch].endswith(CLOSE):
            return False

        # The opening marker must precede the "]]" just typed.
        start = find_link_start(line, cursor.ch - len(CLOSE))
        if start is None:
            return False

        span = line[start:cursor.ch]
        if CLOSE in span[len(OPEN):-len(CLOSE)]:
            # The nearest "[[" was closed earlier; this "]]" closes nothing.
            return False
        if is_specialized(span):
            logger.debug("change: link at %d:%d already specialized", cursor.line, start)
            return False

        return self._format(cursor.line, line, LinkSpan(start, cursor.ch))

    def _format(self, line_no: int, line: str, span: LinkSpan) -> bool:
        new_line = format_link(line, span.start, span.end, self.settings())
        if new_line is None:
            logger.debug("link at %d:%d left unchanged", line_no, span.start)
            return False
        self._apply(line_no, new_line)
        return True

    def _apply(self, line_no: int, text: str) -> None:
        self._formatting = True
        try:
            self.editor.set_line(line_no, text)
        finally:
            self._formatting = False
