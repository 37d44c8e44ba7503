"""Whole-note aliasing driver."""

import re
from dataclasses import dataclass
from pathlib import Path

from ..config import ZettelSettings
from .alias import CLOSE, OPEN, format_link

# Inline code: a run of backticks closed by a run of the same length.
CODE_SPAN_RE = re.compile(r"(`+)(?:.*?[^`])?\1(?!`)")


@dataclass
class AliasResult:
    """Result of aliasing a note."""

    changed: bool
    count: int  # number of links rewritten
    original_text: str
    formatted_text: str


def _code_ranges(line: str) -> list[tuple[int, int]]:
    return [(m.start(), m.end()) for m in CODE_SPAN_RE.finditer(line)]


def _in_ranges(pos: int, ranges: list[tuple[int, int]]) -> bool:
    return any(start <= pos < end for start, end in ranges)


def alias_line(line: str, settings: ZettelSettings) -> tuple[str, int]:
    """Alias every closed link on a single line.

    Embeds (![[...]]) and links inside inline code are left alone.

    Returns:
        (new line, number of links rewritten)
    """
    count = 0
    pos = 0

    while True:
        start = line.find(OPEN, pos)
        if start == -1:
            break
        close = line.find(CLOSE, start + len(OPEN))
        if close == -1:
            break
        end = close + len(CLOSE)

        if (start > 0 and line[start - 1] == "!") or _in_ranges(start, _code_ranges(line)):
            pos = end
            continue

        new_line = format_link(line, start, end, settings)
        if new_line is not None:
            end += len(new_line) - len(line)
            line = new_line
            count += 1
        pos = end

    return line, count


def alias_text(text: str, settings: ZettelSettings) -> AliasResult:
    """Alias all links in a note, skipping fenced code blocks.

    Args:
        text: Full note content
        settings: Settings snapshot (id grammar)

    Returns:
        AliasResult with the rewritten text and change information
    """
    lines = text.splitlines(keepends=True)
    result = []
    count = 0
    in_fence = False

    for ln in lines:
        content = ln.rstrip("\r\n")
        ending = ln[len(content):]

        if content.lstrip().startswith("```"):
            in_fence = not in_fence
            result.append(ln)
            continue

        if in_fence or OPEN not in content:
            result.append(ln)
            continue

        new_content, n = alias_line(content, settings)
        count += n
        result.append(new_content + ending)

    formatted = "".join(result)
    return AliasResult(
        changed=formatted != text,
        count=count,
        original_text=text,
        formatted_text=formatted,
    )


def alias_file(
    file_path: Path,
    settings: ZettelSettings,
    dry_run: bool = True,
) -> AliasResult:
    """Alias links in a note file.

    Args:
        file_path: Path to the note file
        settings: Settings snapshot
        dry_run: If True, don't write changes

    Returns:
        AliasResult
    """
    raw_text = file_path.read_text(encoding="utf-8")
    result = alias_text(raw_text, settings)

    if not dry_run and result.changed:
        write_atomic(file_path, result.formatted_text)

    return result


def write_atomic(file_path: Path, text: str) -> None:
    """Write via a temp file in the same directory, then replace."""
    tmp_path = file_path.with_name(file_path.name + ".tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(file_path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
