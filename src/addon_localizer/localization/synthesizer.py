"""
Regeneration of locale files from a key -> value map.

Locale files are edited by hand as well as by this tool, so an existing file
is rewritten line by line: everything that is not a ``L["key"] = "value"``
assignment is copied through, unchanged assignments keep their exact bytes
and only changed, removed and new keys touch the output.

Two file shapes are supported:

* guarded files, where the assignments sit inside
  ``if locale == "deDE" then ... end``; keys that are not in the new map
  are kept as they are
* unguarded base files, where the run from the first to the last
  assignment is the editable region; keys that are not in the new map are
  dropped as orphans
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from .extractor import Assignment, GlueStringExtractor
from .keys import KeyMap, KeySet, sort_keys
from .lua_strings import escape_lua_string

logger = logging.getLogger(__name__)

NO_ASSIGNMENTS_WARNING = (
    '-- Warning: Could not find any L["key"] assignments, preserving original file'
)
GUARDED_BLOCK_INDENT = "    "

_GUARD_PATTERN = re.compile(r"^\s*if\s+locale\s*==")
_BLOCK_END_PATTERN = re.compile(r"^\s*end\b")


class LocaleFileSynthesizer:
    """
    Build locale file lines from translations.

    Args:
        lookup_identifier: Name of the localization table (``L``)
        addon_namespace: Addon table name bound in the file header
        table_expression: Expression the lookup identifier is bound to
    """

    def __init__(
        self,
        lookup_identifier: str = "L",
        addon_namespace: str = "TRB",
        table_expression: str = "TRB.Localization",
    ) -> None:
        self.lookup_identifier: str = lookup_identifier
        self.addon_namespace: str = addon_namespace
        self.table_expression: str = table_expression
        self._extractor: GlueStringExtractor = GlueStringExtractor(
            lookup_identifier=lookup_identifier, template_functions=()
        )

    def parse_assignment(self, line: str) -> Assignment | None:
        return self._extractor.parse_assignment(line)

    def format_assignment(self, key: str, value: str, indent: str = "") -> str:
        return f'{indent}{self.lookup_identifier}["{key}"] = "{escape_lua_string(value)}"'

    def synthesize(
        self,
        locale_code: str,
        translations: Mapping[str, str],
        existing_lines: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Produce the lines of a locale file.

        Args:
            locale_code: Locale the file is for
            translations: Desired key -> value map; blank values delete keys
            existing_lines: Current file lines, or None for a new file
        """
        if existing_lines is None or not any(line.strip() for line in existing_lines):
            return self.new_file([locale_code], translations)
        return self.merge_with_existing(existing_lines, translations)

    def new_file(
        self,
        locale_codes: Sequence[str],
        translations: Mapping[str, str],
        spacer: str = GUARDED_BLOCK_INDENT,
    ) -> list[str]:
        """
        Emit the standard template for a new file.

        Several locale codes produce a guard joined with ``or``, which is how
        GT files cover every locale sharing a base locale. ``spacer`` is the
        line between the table binding and the assignments.
        """
        condition = " or ".join(f'locale == "{code}"' for code in locale_codes)
        lines = [
            f"local _, {self.addon_namespace} = ...",
            "",
            "local locale = GetLocale()",
            "",
            f"if {condition} then",
            f"{GUARDED_BLOCK_INDENT}local {self.lookup_identifier} = {self.table_expression}",
            spacer,
        ]
        lines.extend(
            self.format_assignment(key, value, GUARDED_BLOCK_INDENT)
            for key, value in _sorted_items(translations)
            if value.strip()
        )
        lines.extend(["end", ""])
        return lines

    def merge_with_existing(
        self, existing_lines: Sequence[str], translations: Mapping[str, str]
    ) -> list[str]:
        """
        Rewrite the editable region of an existing file.

        Returns the original lines with a warning line prepended when the
        file has neither a locale guard nor any assignment.
        """
        guard = find_guarded_block(existing_lines)
        if guard is not None:
            region_start, region_end = guard[0] + 1, guard[1]
            guarded = True
        else:
            assignment_indices = [
                index
                for index, line in enumerate(existing_lines)
                if self._extractor.scan_line(line).is_assignment
            ]
            if not assignment_indices:
                logger.warning(
                    "No locale guard or assignments found, preserving original file"
                )
                return [NO_ASSIGNMENTS_WARNING, *existing_lines]
            region_start, region_end = assignment_indices[0], assignment_indices[-1] + 1
            guarded = False

        new_map: KeyMap[str] = KeyMap(translations)
        handled = KeySet()
        body: list[str] = []
        first_indent: str | None = None
        skipped_duplicates = 0
        dropped = 0

        for line in existing_lines[region_start:region_end]:
            assignment = self.parse_assignment(line)
            if assignment is None:
                # Computed values are kept verbatim
                compound_key = self._extractor.scan_line(line).assigned_key
                if compound_key is not None:
                    handled.add(compound_key)
                    if first_indent is None:
                        first_indent = line[: len(line) - len(line.lstrip())]
                body.append(line)
                continue
            if first_indent is None:
                first_indent = assignment.indent

            key = assignment.key
            if key in handled:
                skipped_duplicates += 1
                logger.debug(f"Skipping duplicate assignment: {key}")
                continue

            if key in new_map:
                handled.add(key)
                new_value = new_map[key]
                if not new_value.strip():
                    dropped += 1
                    logger.debug(f"Removing cleared key: {key}")
                elif new_value == assignment.value:
                    body.append(line)
                else:
                    body.append(self.format_assignment(key, new_value, assignment.indent))
            elif guarded:
                handled.add(key)
                body.append(line)
            else:
                dropped += 1
                logger.debug(f"Removing orphaned key: {key}")

        default_indent = GUARDED_BLOCK_INDENT if guarded else (first_indent or "")
        appended = 0
        for key, value in _sorted_items(new_map):
            if key in handled or not value.strip():
                continue
            body.append(self.format_assignment(key, value, default_indent))
            appended += 1

        logger.debug(
            f"Merged locale file: {appended} keys appended, "
            f"{skipped_duplicates} duplicates collapsed, {dropped} lines removed"
        )
        return [
            *existing_lines[:region_start],
            *body,
            *existing_lines[region_end:],
        ]


def find_guarded_block(lines: Sequence[str]) -> tuple[int, int] | None:
    """
    Locate ``if locale == ... then`` and its closing ``end``.

    Returns:
        Indices of the guard line and of the closing line, or None when
        there is no guard or it is never closed
    """
    for start, line in enumerate(lines):
        if _GUARD_PATTERN.match(line):
            for end in range(start + 1, len(lines)):
                if _BLOCK_END_PATTERN.match(lines[end]):
                    return start, end
            return None
    return None


def _sorted_items(translations: Mapping[str, str]) -> list[tuple[str, str]]:
    return [(key, translations[key]) for key in sort_keys(translations)]
