"""Identifier grammars recognised at the start of a link's content.

Three shapes are supported:
- folgezettel: leading digits followed by lowercase letters, digits or hyphens
  (``1``, ``1a2``, ``12-4b``)
- timestamp: exactly twelve digits (``202401311245``)
- custom: a user-supplied pattern whose first capturing group is the id

A grammar is compiled once per distinct (kind, pattern) pair and reused,
so a settings change is seen on the next event without recompiling the
pattern on every keystroke.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from ..config import DEFAULT_CUSTOM_REGEX, ID_FORMATS, ZettelSettings

logger = logging.getLogger(__name__)

FOLGEZETTEL_PATTERN = DEFAULT_CUSTOM_REGEX
TIMESTAMP_PATTERN = r"([0-9]{12})"


class PatternError(ValueError):
    """Raised when an identifier grammar cannot be built."""


@dataclass(frozen=True)
class IdGrammar:
    kind: str
    source: str
    regex: re.Pattern[str]

    @classmethod
    def compile(cls, kind: str, custom: str | None = None) -> "IdGrammar":
        """Build a validated grammar.

        Raises PatternError for an unknown kind, a pattern that does not
        compile, or a pattern without a capturing group.
        """
        if kind == "folgezettel":
            source = FOLGEZETTEL_PATTERN
        elif kind == "timestamp":
            source = TIMESTAMP_PATTERN
        elif kind == "custom":
            source = custom or ""
            if not source.strip():
                raise PatternError("Custom id pattern is empty")
        else:
            raise PatternError(
                f"Unknown id format {kind!r} (expected one of {', '.join(ID_FORMATS)})"
            )

        try:
            regex = re.compile(source)
        except re.error as e:
            raise PatternError(f"Invalid id pattern {source!r}: {e}") from e

        if regex.groups < 1:
            raise PatternError(f"Id pattern {source!r} has no capturing group")

        return cls(kind=kind, source=source, regex=regex)

    def match_prefix(self, content: str) -> str | None:
        """Return the identifier at the very start of ``content``, if any."""
        m = self.regex.match(content)
        if not m:
            return None
        ident = m.group(1)
        # An optional group that did not participate, or matched nothing,
        # is not an identifier.
        return ident or None


@lru_cache(maxsize=32)
def _cached(kind: str, custom: str) -> IdGrammar:
    return IdGrammar.compile(kind, custom)


def default_grammar() -> IdGrammar:
    return _cached("folgezettel", "")


def resolve_grammar(settings: ZettelSettings) -> IdGrammar:
    """Resolve the grammar for a settings snapshot.

    An unusable custom pattern is reported and the folgezettel grammar is
    used for this call; the next call tries the configured pattern again.
    """
    custom = settings.custom_regex if settings.id_format == "custom" else ""
    try:
        return _cached(settings.id_format, custom)
    except PatternError as e:
        logger.warning("%s; falling back to the folgezettel grammar", e)
        return default_grammar()
