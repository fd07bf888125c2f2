"""Minimal JSON string escaping.

Titles routinely carry Markdown and HTML snippets, so only the characters
JSON itself requires are escaped. `<`, `>`, `&` and non-ASCII text pass
through untouched.
"""

import re

_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# Lone surrogates cannot be encoded as UTF-8, so they are written as escapes.
_NEEDS_ESCAPE = re.compile('["\\\\\x00-\x1f\ud800-\udfff]')


def _escape_char(match: re.Match) -> str:
    char = match.group(0)
    return _SHORT_ESCAPES.get(char) or f"\\u{ord(char):04x}"


def escape_json_string(text: str) -> str:
    """Escape text for use between the quotes of a JSON string."""
    return _NEEDS_ESCAPE.sub(_escape_char, text)
