"""
Line-oriented extraction of ``L["key"]`` references from Lua source.

This is pattern matching, not a Lua parser. A reference is recognized when
the lookup identifier is followed by ``[`` and a quoted literal; anything
the patterns do not recognize (unterminated literals, computed keys) is
skipped without aborting the scan.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .keys import KeySet
from .lua_strings import (
    QUOTE_CHARACTERS,
    read_string_literal,
    skip_string_literal,
    strip_comment,
    unescape_lua_string,
)
from .models import LOCATION_CAP, GlueLocation, ParseResult

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_FUNCTIONS: tuple[str, ...] = ("string.format",)

_VALUE_TERMINATOR_PATTERN = re.compile(r"\s*;?\s*$")


@dataclass(frozen=True, slots=True)
class KeyReference:
    """A single ``L["key"]`` match on a line."""

    key: str
    is_concatenated: bool
    is_template_used: bool
    start: int
    bracket_start: int


@dataclass(frozen=True, slots=True)
class LineScan:
    """References found on a line and whether the line assigns a key."""

    references: tuple[KeyReference, ...]
    is_assignment: bool = False
    assigned_key: str | None = None
    value_start: int | None = None

    @property
    def value_references(self) -> tuple[KeyReference, ...]:
        """References on the right-hand side of an assignment."""
        if self.value_start is None:
            return ()
        return tuple(ref for ref in self.references if ref.start >= self.value_start)


@dataclass(frozen=True, slots=True)
class Assignment:
    """A ``L["key"] = "value"`` line whose value is a single string literal."""

    key: str
    value: str
    indent: str


def find_closing_bracket(line: str, bracket_start: int) -> int | None:
    """
    Find the ``]`` matching the ``[`` at ``bracket_start``.

    Brackets inside quoted literals are ignored. Returns None when the
    bracket is never closed on this line.
    """
    depth = 0
    index = bracket_start
    while index < len(line):
        char = line[index]
        if char in QUOTE_CHARACTERS:
            index = skip_string_literal(line, index)
            continue
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def has_concatenation_in_brackets(line: str, bracket_start: int) -> bool:
    """
    Check whether the key expression in ``[...]`` is built with ``..``.

    Only the bracket span that opens at ``bracket_start`` is inspected, so
    ``L["Author"] .. ":"`` is not concatenation while ``L["Base" .. suffix]``
    is. An unclosed bracket never counts as concatenation.
    """
    closing = find_closing_bracket(line, bracket_start)
    if closing is None:
        return False

    index = bracket_start + 1
    while index < closing:
        char = line[index]
        if char in QUOTE_CHARACTERS:
            index = skip_string_literal(line, index)
            continue
        if line.startswith("..", index):
            return True
        index += 1
    return False


class GlueStringExtractor:
    """
    Scan Lua lines for glue string references.

    Args:
        lookup_identifier: Name of the localization table (``L``)
        template_functions: Formatting calls whose first argument is a template
        location_cap: Maximum locations kept per key and location kind
    """

    def __init__(
        self,
        lookup_identifier: str = "L",
        template_functions: Sequence[str] = DEFAULT_TEMPLATE_FUNCTIONS,
        location_cap: int = LOCATION_CAP,
    ) -> None:
        self.lookup_identifier: str = lookup_identifier
        self.template_functions: tuple[str, ...] = tuple(template_functions)
        self.location_cap: int = location_cap

        identifier = re.escape(lookup_identifier)
        self._reference_pattern: re.Pattern[str] = re.compile(
            rf"(?<!\w){identifier}\s*(\[)\s*(?=[\"'])"
        )
        self._assignment_pattern: re.Pattern[str] = re.compile(
            rf"^\s*{identifier}\s*\[\s*(?=[\"'])"
        )
        self._assignment_tail_pattern: re.Pattern[str] = re.compile(r"\s*\]\s*=(?!=)")

        self._template_call_pattern: re.Pattern[str] | None = None
        if self.template_functions:
            functions = "|".join(
                re.escape(name)
                for name in sorted(self.template_functions, key=len, reverse=True)
            )
            self._template_call_pattern = re.compile(
                rf"(?<![\w.])(?:{functions})\s*\(\s*$"
            )

    def _is_template_argument(self, line: str, reference_start: int) -> bool:
        if self._template_call_pattern is None:
            return False
        return self._template_call_pattern.search(line, 0, reference_start) is not None

    def scan_line(self, line: str) -> LineScan:
        """
        Find every glue string reference on a single line.

        Returns:
            LineScan with one KeyReference per match, plus the assigned key
            when the line is ``L["key"] = ...``
        """
        references: list[KeyReference] = []
        for match in self._reference_pattern.finditer(line):
            literal = read_string_literal(line, match.end())
            if literal is None or not literal.raw:
                continue
            bracket_start = match.start(1)
            references.append(
                KeyReference(
                    key=literal.raw,
                    is_concatenated=has_concatenation_in_brackets(line, bracket_start),
                    is_template_used=self._is_template_argument(line, match.start()),
                    start=match.start(),
                    bracket_start=bracket_start,
                )
            )

        assigned_key, value_start = self._match_assignment(line)
        return LineScan(
            references=tuple(references),
            is_assignment=assigned_key is not None,
            assigned_key=assigned_key,
            value_start=value_start,
        )

    def _match_assignment(self, line: str) -> tuple[str | None, int | None]:
        match = self._assignment_pattern.match(line)
        if match is None:
            return None, None
        literal = read_string_literal(line, match.end())
        if literal is None or not literal.raw:
            return None, None
        tail = self._assignment_tail_pattern.match(line, literal.end)
        if tail is None:
            return None, None
        return literal.raw, tail.end()

    def parse_assignment(self, line: str) -> Assignment | None:
        """
        Parse an assignment whose value is a single string literal.

        Assignments with computed values (``L["A"] = L["B"] .. "!"``) return
        None. A trailing ``--`` comment and ``;`` are allowed after the value.
        """
        assigned_key, value_start = self._match_assignment(line)
        if assigned_key is None or value_start is None:
            return None

        value_text = strip_comment(line[value_start:])
        literal_start = len(value_text) - len(value_text.lstrip())
        literal = read_string_literal(value_text, literal_start)
        if literal is None:
            return None
        if _VALUE_TERMINATOR_PATTERN.fullmatch(value_text, literal.end) is None:
            return None

        return Assignment(
            key=assigned_key,
            value=unescape_lua_string(literal.raw),
            indent=line[: len(line) - len(line.lstrip())],
        )

    def scan_lines(self, lines: Iterable[str], file_path: str) -> ParseResult:
        """
        Scan the lines of one file into a ``ParseResult``.

        Every match counts as one occurrence. Concatenated and template
        references record their 1-based line. The first sighting of any
        other key in the file records a file-level location (line 0).
        """
        result = ParseResult(location_cap=self.location_cap)
        seen_in_file = KeySet()

        for line_number, line in enumerate(lines, start=1):
            for reference in self.scan_line(line).references:
                info = result.get_or_create(reference.key)
                info.occurrence_count += 1
                location = GlueLocation(file_path, line_number)

                if reference.is_concatenated:
                    info.has_concatenation = True
                    _ = info.add_location(location)
                if reference.is_template_used:
                    info.used_in_template_call = True
                    _ = info.add_template_location(location)

                if reference.key not in seen_in_file:
                    seen_in_file.add(reference.key)
                    if not (reference.is_concatenated or reference.is_template_used):
                        _ = info.add_location(GlueLocation(file_path, 0))

        logger.debug(f"Found {len(result)} glue strings in {file_path}")
        return result
