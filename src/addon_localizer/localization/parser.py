"""
File and directory entry points for scanning Lua sources and locale files.

``LuaLocalizationParser`` reads through a ``FileSystem`` so it can run
against the local disk or any other storage. Missing files and directories
raise ``LocalizationNotFoundError``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import PurePath

from ..utils.core.exceptions import LocalizationNotFoundError
from .dataset import LocalizationDataSet
from .extractor import GlueStringExtractor
from .filesystem import FileSystem, LocalFileSystem
from .format_specifiers import FormatParameter, parse_format_specifiers
from .keys import KeyMap, KeySet
from .locales import get_gt_base_locales, get_gt_file_name, normalize_locale_code
from .models import DuplicateEntry, LocaleFileContents, ParseResult

logger = logging.getLogger(__name__)

DEFAULT_LOCALE_EXCLUDE_PATTERNS: tuple[str, ...] = ("GT.lua",)


def _path_segments(path: str) -> list[str]:
    return [segment.casefold() for segment in PurePath(path.replace("\\", "/")).parts]


def is_excluded_path(
    file_path: str, base_directory: str, exclude_subdirectories: Sequence[str]
) -> bool:
    """
    Check whether a file lies under one of the excluded subdirectories.

    Each exclusion is a sequence of path segments (``"Libs"`` or
    ``"Libs/Ace3"``) matched case-insensitively against consecutive
    segments of the path relative to ``base_directory``.
    """
    try:
        relative = str(PurePath(file_path).relative_to(base_directory))
    except ValueError:
        relative = file_path
    path_segments = _path_segments(relative)[:-1]

    for excluded in exclude_subdirectories:
        excluded_segments = _path_segments(excluded)
        if not excluded_segments:
            continue
        width = len(excluded_segments)
        for start in range(len(path_segments) - width + 1):
            if path_segments[start : start + width] == excluded_segments:
                return True
    return False


class LuaLocalizationParser:
    """
    Scan Lua sources for glue strings and load locale files.

    Args:
        file_system: Storage to read from (local disk by default)
        extractor: Line scanner (``L["key"]`` with ``string.format`` by default)
    """

    def __init__(
        self,
        file_system: FileSystem | None = None,
        extractor: GlueStringExtractor | None = None,
    ) -> None:
        self.file_system: FileSystem = file_system or LocalFileSystem()
        self.extractor: GlueStringExtractor = extractor or GlueStringExtractor()

    def _require_file(self, file_path: str) -> None:
        if not self.file_system.file_exists(file_path):
            raise LocalizationNotFoundError(f"File not found: {file_path}", file_path)

    def _require_directory(self, directory: str) -> None:
        if not self.file_system.directory_exists(directory):
            raise LocalizationNotFoundError(
                f"Directory not found: {directory}", directory
            )

    # Source scanning

    def parse_file(self, file_path: str) -> ParseResult:
        """Scan one Lua file for glue string references."""
        self._require_file(file_path)
        lines = self.file_system.read_lines(file_path)
        return self.extractor.scan_lines(lines, file_path)

    def parse_directory(
        self,
        directory: str,
        exclude_subdirectories: Sequence[str] | None = None,
        pattern: str = "*.lua",
    ) -> ParseResult:
        """
        Scan every Lua file below ``directory``.

        Files are processed in sorted order and merged one at a time, so the
        locations that survive the cap do not depend on listing order.

        Args:
            directory: Root of the addon source tree
            exclude_subdirectories: Subdirectories (relative segment
                sequences such as ``"Libs"`` or ``"Localization"``) to skip
            pattern: File name glob of source files
        """
        self._require_directory(directory)

        files = sorted(self.file_system.get_files(directory, pattern, recursive=True))
        if exclude_subdirectories:
            files = [
                file_path
                for file_path in files
                if not is_excluded_path(file_path, directory, exclude_subdirectories)
            ]

        result = ParseResult(location_cap=self.extractor.location_cap)
        for file_path in files:
            _ = result.merge(self.parse_file(file_path))

        logger.info(
            f"Scanned {len(files)} Lua files in {directory}: {len(result)} glue strings"
        )
        return result

    def parse_localization_definitions(self, file_path: str) -> KeySet:
        """Keys assigned (``L["key"] = ...``) in a file."""
        self._require_file(file_path)
        keys = KeySet()
        for line in self.file_system.read_lines(file_path):
            scan = self.extractor.scan_line(line)
            if scan.assigned_key is not None:
                keys.add(scan.assigned_key)
        return keys

    def parse_localization_usages(self, file_path: str) -> KeySet:
        """Keys referenced on the right-hand side of assignments in a file."""
        self._require_file(file_path)
        keys = KeySet()
        for line in self.file_system.read_lines(file_path):
            scan = self.extractor.scan_line(line)
            keys.update(reference.key for reference in scan.value_references)
        return keys

    def parse_format_parameters(self, file_path: str) -> KeyMap[list[FormatParameter]]:
        """Format specifiers of every string value assigned in a file."""
        self._require_file(file_path)
        parameters: KeyMap[list[FormatParameter]] = KeyMap()
        for line in self.file_system.read_lines(file_path):
            assignment = self.extractor.parse_assignment(line)
            if assignment is None:
                continue
            found = parse_format_specifiers(assignment.value)
            if found:
                parameters[assignment.key] = found
        return parameters

    # Locale files

    def parse_locale_translations(self, file_path: str) -> LocaleFileContents:
        """
        Read the translations of a locale file.

        The last assignment of a key wins, as it does when Lua runs the
        file. Keys assigned more than once are reported as duplicates with
        all of their values in file order.
        """
        self._require_file(file_path)
        values_by_key: KeyMap[list[str]] = KeyMap()

        for line in self.file_system.read_lines(file_path):
            assignment = self.extractor.parse_assignment(line)
            if assignment is None:
                continue
            values = values_by_key.get(assignment.key)
            if values is None:
                values_by_key[assignment.key] = [assignment.value]
            else:
                values.append(assignment.value)

        translations: KeyMap[str] = KeyMap()
        duplicates: KeyMap[DuplicateEntry] = KeyMap()
        for key, values in values_by_key.items():
            translations[key] = values[-1]
            if len(values) > 1:
                duplicates[key] = DuplicateEntry(key=key, values=tuple(values))

        if duplicates:
            logger.debug(f"{len(duplicates)} duplicate keys in {file_path}")
        return LocaleFileContents(translations=translations, duplicates=duplicates)

    def parse_localization_directory(
        self,
        directory: str,
        exclude_patterns: Sequence[str] | None = DEFAULT_LOCALE_EXCLUDE_PATTERNS,
    ) -> LocalizationDataSet:
        """
        Load every ``<locale>.lua`` file of a localization directory.

        Args:
            directory: The addon's localization directory
            exclude_patterns: File name suffixes to skip (GT files by default)
        """
        self._require_directory(directory)
        dataset = LocalizationDataSet()
        excluded = [pattern.casefold() for pattern in exclude_patterns or ()]

        for file_path in self.file_system.get_files(directory, "*.lua"):
            file_name = PurePath(file_path).name
            if any(file_name.casefold().endswith(pattern) for pattern in excluded):
                continue
            locale_code = normalize_locale_code(PurePath(file_name).stem)
            if locale_code is None:
                logger.debug(f"Skipping non-locale file {file_name}")
                continue

            contents = self.parse_locale_translations(file_path)
            dataset.add_locale(locale_code, contents.translations, contents.duplicates)
            logger.debug(
                f"Loaded {len(contents.translations)} translations for {locale_code}"
            )

        logger.info(
            f"Loaded {len(dataset.loaded_locales)} locales from {directory} "
            f"({len(dataset.all_keys)} keys)"
        )
        return dataset

    def load_gt_files(self, directory: str, dataset: LocalizationDataSet) -> int:
        """
        Load the GT file of every base locale into ``dataset``.

        Returns:
            Number of GT files loaded
        """
        self._require_directory(directory)
        loaded = 0
        for base_locale in get_gt_base_locales():
            file_path = str(PurePath(directory) / get_gt_file_name(base_locale))
            if not self.file_system.file_exists(file_path):
                logger.debug(f"No GT file for {base_locale}")
                continue
            contents = self.parse_locale_translations(file_path)
            dataset.add_gt_locale(base_locale, contents.translations)
            loaded += 1
        return loaded
