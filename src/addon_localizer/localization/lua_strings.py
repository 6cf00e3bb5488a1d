"""
Helpers for reading and writing Lua string literals.

Only short literal strings (``"..."`` and ``'...'``) are understood. Long
bracket strings and numeric escapes are left alone: values are copied
through as the text between the quotes.
"""

from __future__ import annotations

from typing import NamedTuple

QUOTE_CHARACTERS = ('"', "'")

_UNESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# Characters that keep a backslash as the start of an escape sequence on write
_ESCAPE_SEQUENCE_CHARACTERS = frozenset('nrt\\"')


class StringLiteral(NamedTuple):
    """A quoted literal found in a line of source."""

    raw: str
    quote: str
    start: int
    end: int


def read_string_literal(text: str, start: int) -> StringLiteral | None:
    """
    Read the quoted literal that opens at ``text[start]``.

    Args:
        text: Line of Lua source
        start: Index of the opening quote character

    Returns:
        The literal with its raw (still escaped) contents and the index just
        past the closing quote, or None if ``text[start]`` is not a quote or
        the literal is never closed on this line.
    """
    if start >= len(text) or text[start] not in QUOTE_CHARACTERS:
        return None

    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return StringLiteral(text[start + 1 : index], quote, start, index + 1)
        index += 1
    return None


def skip_string_literal(text: str, start: int) -> int:
    """
    Return the index just past the literal opening at ``start``.

    An unterminated literal runs to the end of the line.
    """
    literal = read_string_literal(text, start)
    return literal.end if literal is not None else len(text)


def strip_comment(line: str) -> str:
    """Remove a trailing ``--`` comment that is not inside a string literal."""
    index = 0
    while index < len(line):
        char = line[index]
        if char in QUOTE_CHARACTERS:
            index = skip_string_literal(line, index)
            continue
        if line.startswith("--", index):
            return line[:index]
        index += 1
    return line


def unescape_lua_string(raw: str) -> str:
    """Decode the common backslash escapes of a Lua literal."""
    if "\\" not in raw:
        return raw

    parts: list[str] = []
    index = 0
    while index < len(raw):
        char = raw[index]
        if char == "\\" and index + 1 < len(raw):
            following = raw[index + 1]
            replacement = _UNESCAPES.get(following)
            if replacement is not None:
                parts.append(replacement)
            else:
                parts.append(char + following)
            index += 2
            continue
        parts.append(char)
        index += 1
    return "".join(parts)


def escape_lua_string(value: str) -> str:
    """
    Escape a value for a double-quoted Lua literal.

    Sequences that are already escaped are kept as they are: a quote preceded
    by a single backslash is not escaped again, and a backslash that starts
    a known escape sequence is left alone.
    """
    if not value:
        return value

    parts: list[str] = []
    for index, char in enumerate(value):
        match char:
            case '"':
                already_escaped = (
                    index > 0
                    and value[index - 1] == "\\"
                    and (index < 2 or value[index - 2] != "\\")
                )
                parts.append(char if already_escaped else '\\"')
            case "\\":
                if (
                    index + 1 < len(value)
                    and value[index + 1] in _ESCAPE_SEQUENCE_CHARACTERS
                ):
                    parts.append(char)
                else:
                    parts.append("\\\\")
            case "\n":
                parts.append("\\n")
            case "\r":
                parts.append("\\r")
            case "\t":
                parts.append("\\t")
            case _:
                parts.append(char)
    return "".join(parts)
