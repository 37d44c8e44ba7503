"""Tests for whole-note aliasing."""

from pathlib import Path

from folgezettel.config import ZettelSettings
from folgezettel.format.formatter import alias_file, alias_line, alias_text

DEFAULT = ZettelSettings()


def test_alias_line_multiple_links():
    """Test that every link on a line is aliased."""
    line, count = alias_line("[[1 Root]] then [[1a Child]] and [[Inbox]]", DEFAULT)
    assert line == "[[1 Root|1]] then [[1a Child|1a]] and [[Inbox]]"
    assert count == 2


def test_alias_line_skips_embeds():
    """Test that embeds are left alone."""
    line, count = alias_line("![[1a Diagram]] and [[1b Note]]", DEFAULT)
    assert line == "![[1a Diagram]] and [[1b Note|1b]]"
    assert count == 1


def test_alias_line_skips_inline_code():
    """Test that links in inline code are preserved."""
    line, count = alias_line("Use `[[1a Title]]` to link [[1b X]]", DEFAULT)
    assert line == "Use `[[1a Title]]` to link [[1b X|1b]]"
    assert count == 1


def test_alias_line_keeps_existing_aliases():
    """Test that aliased links stay as they are."""
    line = "[[1a Title|Custom]] and [[1b Other#Part]]"
    assert alias_line(line, DEFAULT) == (line, 0)


def test_alias_line_unclosed_link():
    """Test a trailing unclosed link."""
    line, count = alias_line("[[1a Done]] and [[1b open", DEFAULT)
    assert line == "[[1a Done|1a]] and [[1b open"
    assert count == 1


def test_alias_text_skips_code_fence():
    """Test that fenced code blocks are not processed."""
    text = "Intro [[1 Root]]\n\n```markdown\n[[1a Example]]\n```\n\nOutro [[2 Next]]\n"
    result = alias_text(text, DEFAULT)

    assert result.changed
    assert result.count == 2
    assert "[[1a Example]]\n" in result.formatted_text
    assert "Intro [[1 Root|1]]" in result.formatted_text
    assert "Outro [[2 Next|2]]" in result.formatted_text


def test_alias_text_preserves_line_endings():
    """Test CRLF line endings survive."""
    text = "[[1 Root]]\r\nplain\r\n"
    result = alias_text(text, DEFAULT)
    assert result.formatted_text == "[[1 Root|1]]\r\nplain\r\n"


def test_alias_text_unchanged():
    """Test text without eligible links."""
    text = "# Title\n\nNo links, [[Inbox]] only.\n"
    result = alias_text(text, DEFAULT)
    assert not result.changed
    assert result.count == 0
    assert result.formatted_text == text


def test_alias_text_is_idempotent():
    """Test that a second pass changes nothing."""
    text = "[[1 Root]] and [[1a Child]]\n"
    once = alias_text(text, DEFAULT).formatted_text
    assert not alias_text(once, DEFAULT).changed


def test_alias_file_dry_run(tmp_path: Path):
    """Test that dry run leaves the file untouched."""
    note = tmp_path / "1 Root.md"
    note.write_text("See [[1a Child]]\n", encoding="utf-8")

    result = alias_file(note, DEFAULT, dry_run=True)

    assert result.changed
    assert note.read_text(encoding="utf-8") == "See [[1a Child]]\n"


def test_alias_file_write(tmp_path: Path):
    """Test writing aliased links back."""
    note = tmp_path / "1 Root.md"
    note.write_text("See [[1a Child]]\n", encoding="utf-8")

    alias_file(note, DEFAULT, dry_run=False)

    assert note.read_text(encoding="utf-8") == "See [[1a Child|1a]]\n"
    assert not (tmp_path / "1 Root.md.tmp").exists()
