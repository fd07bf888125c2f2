"""Tests for minimal JSON string escaping."""

import json

import pytest

from keg.encoding import escape_json_string


@pytest.mark.parametrize(
    "text,expected",
    [
        ("plain", "plain"),
        ("<a href='x'>&amp;</a>", "<a href='x'>&amp;</a>"),
        ('"', '\\"'),
        ("\\", "\\\\"),
        ("\b\f\n\r\t", "\\b\\f\\n\\r\\t"),
        ("\x00\x1f", "\\u0000\\u001f"),
        ("\x7f", "\x7f"),
        ("ünï ✓", "ünï ✓"),
    ],
)
def test_escape(text, expected):
    assert escape_json_string(text) == expected


def test_lone_surrogate_is_escaped_and_encodable():
    escaped = escape_json_string("a\ud800b")
    assert escaped == "a\\ud800b"
    assert json.loads(f'"{escaped}"'.encode("utf-8")) == "a\ud800b"
