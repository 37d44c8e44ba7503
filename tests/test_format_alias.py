"""Tests for single-link aliasing."""

import logging

import pytest

from folgezettel.config import ZettelSettings
from folgezettel.format.alias import (
    find_link_start,
    format_link,
    is_specialized,
    link_content,
)

DEFAULT = ZettelSettings()


def _format(line: str, settings: ZettelSettings = DEFAULT) -> str | None:
    """Format the first link of ``line`` with the span ending at its "]]"."""
    start = line.index("[[")
    end = line.index("]]", start) + 2
    return format_link(line, start, end, settings)


def test_format_link_in_sentence():
    """Test the basic rewrite inside surrounding text."""
    line = "See [[1a2 Some Title]] for more."
    assert format_link(line, 4, 22, DEFAULT) == "See [[1a2 Some Title|1a2]] for more."


def test_format_link_id_only():
    """Test a link that is just an id."""
    assert _format("[[1a2]]") == "[[1a2|1a2]]"


def test_format_link_branch_id():
    """Test an id with a dash branch."""
    assert _format("[[12-4b Branch note]]") == "[[12-4b Branch note|12-4b]]"


@pytest.mark.parametrize(
    "line",
    [
        "[[1a2 Some Title|custom]]",
        "[[1a2 Some Title#Heading]]",
        "[[1a2 Some Title#^block]]",
        "[[1a2 Some Title^block]]",
    ],
)
def test_format_link_leaves_specialized_links(line):
    """Test that aliased, heading and block links are not touched."""
    assert _format(line) is None


def test_format_link_requires_id_prefix():
    """Test that the id must start the link."""
    assert _format("[[Some Title 1a2]]") is None
    assert _format("[[Inbox]]") is None


def test_format_link_unclosed():
    """Test that a link still being typed is left alone."""
    line = "See [[1a2 Some Tit"
    assert format_link(line, 4, len(line), DEFAULT) is None


def test_format_link_is_idempotent():
    """Test that formatting an already formatted link changes nothing."""
    once = _format("See [[1a2 Some Title]] for more.")
    assert once == "See [[1a2 Some Title|1a2]] for more."
    assert _format(once) is None


def test_format_link_preserves_text_after_link_in_span():
    """Test a span that extends past the closing marker."""
    line = "[[1a Title]] and more"
    assert format_link(line, 0, len(line), DEFAULT) == "[[1a Title|1a]] and more"


def test_format_link_not_at_opening_marker():
    """Test that a span not starting at "[[" is ignored."""
    assert format_link("x [[1a Title]]", 0, 14, DEFAULT) is None


def test_format_link_timestamp():
    """Test the timestamp grammar."""
    settings = ZettelSettings(id_format="timestamp")
    assert _format("[[202401311245 Meeting]]", settings) == "[[202401311245 Meeting|202401311245]]"
    assert _format("[[1a2 Some Title]]", settings) is None


def test_format_link_custom():
    """Test a custom grammar."""
    settings = ZettelSettings(id_format="custom", custom_regex=r"(Z[0-9]+)")
    assert _format("[[Z12 Title]]", settings) == "[[Z12 Title|Z12]]"
    assert _format("[[1a2 Title]]", settings) is None


def test_format_link_invalid_custom_falls_back(caplog):
    """Test that a broken custom pattern behaves like the default grammar."""
    settings = ZettelSettings(id_format="custom", custom_regex="([0-9]+")

    with caplog.at_level(logging.WARNING):
        result = _format("[[1a2 Some Title]]", settings)

    assert result == "[[1a2 Some Title|1a2]]"
    assert any(r.name == "folgezettel.core.grammar" for r in caplog.records)


def test_find_link_start():
    """Test locating the nearest opening marker."""
    line = "[[a]] and [[1a Title]]"
    assert find_link_start(line, len(line)) == 10
    assert find_link_start(line, 9) == 0
    assert find_link_start("no links here", 5) is None
    assert find_link_start("[[a]]", -1) is None


def test_find_link_start_marker_at_cursor():
    """Test that a marker starting exactly at the cursor counts."""
    assert find_link_start("ab[[", 2) == 2


def test_link_content():
    """Test extracting link content."""
    assert link_content("[[1a Title]]") == "1a Title"
    assert link_content("[[1a Title]] rest") == "1a Title"
    assert link_content("[[1a Title") is None
    assert link_content("1a Title]]") is None
    assert link_content("[[]]") == ""


def test_is_specialized():
    """Test alias, heading and block markers."""
    assert is_specialized("1a|x")
    assert is_specialized("1a#h")
    assert is_specialized("1a^b")
    assert not is_specialized("1a Title")
