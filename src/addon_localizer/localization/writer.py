"""
Writing locale files back to disk.

Saves go through ``LocaleFileSynthesizer`` so hand-maintained structure
survives, optionally after copying the current file to a timestamped
``<file>.<yyyyMMdd_HHmmss>.backup``. Batches of locales are saved
concurrently in worker threads.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from fnmatch import fnmatch
from pathlib import PurePath

from ..utils.core.exceptions import (
    BatchSaveError,
    InvalidLocaleError,
    LocalizationNotFoundError,
)
from .filesystem import FileSystem, LocalFileSystem, detect_newline, split_lines
from .locales import (
    get_gt_file_name,
    get_locale_file_name,
    get_locales_for_base,
    is_english_locale,
    normalize_locale_code,
)
from .synthesizer import LocaleFileSynthesizer

logger = logging.getLogger(__name__)

BACKUP_EXTENSION = ".backup"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
SKIPPED_AFTER_FAILURE = "Skipped after an earlier save failed"


@dataclass(frozen=True, slots=True)
class SaveProgress:
    """Progress of a multi-locale save, reported after each locale."""

    locale_code: str
    processed_count: int
    total_count: int
    is_complete: bool = False
    error: str | None = None

    @property
    def percent_complete(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return self.processed_count / self.total_count * 100


ProgressCallback = Callable[[SaveProgress], None]


class LocalizationFileWriter:
    """
    Save, back up and restore locale files.

    Args:
        file_system: Storage to write to (local disk by default)
        synthesizer: Builds file lines from translations
        clock: Source of the backup timestamp (``datetime.now`` by default)
    """

    def __init__(
        self,
        file_system: FileSystem | None = None,
        synthesizer: LocaleFileSynthesizer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.file_system: FileSystem = file_system or LocalFileSystem()
        self.synthesizer: LocaleFileSynthesizer = synthesizer or LocaleFileSynthesizer()
        self.clock: Callable[[], datetime] = clock or datetime.now

    def _require_directory(self, directory: str) -> None:
        if not self.file_system.directory_exists(directory):
            raise LocalizationNotFoundError(
                f"Localization directory not found: {directory}", directory
            )

    @staticmethod
    def _require_locale(locale_code: str) -> str:
        canonical = normalize_locale_code(locale_code)
        if canonical is None:
            raise InvalidLocaleError(locale_code)
        return canonical

    @staticmethod
    def locale_file_path(directory: str, locale_code: str) -> str:
        return str(PurePath(directory) / get_locale_file_name(locale_code))

    def save_locale_file(
        self,
        directory: str,
        locale_code: str,
        translations: Mapping[str, str],
        create_backup: bool = True,
    ) -> str:
        """
        Save a locale's translations to ``<directory>/<locale>.lua``.

        An existing file is merged line by line and keeps its newline style.
        A blank translation removes the key from the file.

        Args:
            directory: Localization directory
            locale_code: Locale to save
            translations: Key -> translated text
            create_backup: Copy the current file to a timestamped backup first

        Returns:
            Path of the written file

        Raises:
            LocalizationNotFoundError: If the directory does not exist
            InvalidLocaleError: If the locale code is not supported
        """
        self._require_directory(directory)
        locale_code = self._require_locale(locale_code)
        file_path = self.locale_file_path(directory, locale_code)

        existing_lines: list[str] | None = None
        newline = "\n"
        if self.file_system.file_exists(file_path):
            content = self.file_system.read_text(file_path)
            if create_backup:
                _ = self._write_backup(file_path, content)
            existing_lines = split_lines(content)
            newline = detect_newline(content)

        lines = self.synthesizer.synthesize(locale_code, translations, existing_lines)
        self.file_system.write_lines(file_path, lines, newline)
        logger.info(f"Saved {file_path} ({len(lines)} lines)")
        return file_path

    def create_backup(self, file_path: str) -> str:
        """Copy a file to ``<file>.<timestamp>.backup`` and return the backup path."""
        if not self.file_system.file_exists(file_path):
            raise LocalizationNotFoundError(f"File not found: {file_path}", file_path)
        return self._write_backup(file_path, self.file_system.read_text(file_path))

    def _write_backup(self, file_path: str, content: str) -> str:
        timestamp = self.clock().strftime(BACKUP_TIMESTAMP_FORMAT)
        backup_path = f"{file_path}.{timestamp}{BACKUP_EXTENSION}"
        self.file_system.write_text(backup_path, content)
        logger.info(f"Created backup {backup_path}")
        return backup_path

    async def save_multiple_locale_files(
        self,
        directory: str,
        locale_translations: Mapping[str, Mapping[str, str]],
        create_backup: bool = True,
        progress: ProgressCallback | None = None,
        max_concurrency: int = 4,
    ) -> list[str]:
        """
        Save several locales concurrently.

        Progress is reported after every locale. Once a save fails no new
        saves start; saves already running finish, the remaining locales are
        reported as skipped, and ``BatchSaveError`` is raised at the end.

        Returns:
            Locale codes saved, in completion order

        Raises:
            LocalizationNotFoundError: If the directory does not exist
            InvalidLocaleError: If any locale code is not supported or two
                codes name the same locale
            BatchSaveError: If one or more locales failed to save
        """
        self._require_directory(directory)
        canonical_translations: dict[str, Mapping[str, str]] = {}
        for locale_code, translations in locale_translations.items():
            canonical = self._require_locale(locale_code)
            if canonical in canonical_translations:
                raise InvalidLocaleError(
                    locale_code,
                    user_message=f"Locale {canonical} is listed more than once",
                )
            canonical_translations[canonical] = translations

        total = len(canonical_translations)
        semaphore = asyncio.Semaphore(max(1, max_concurrency))
        failures: dict[str, str] = {}
        completed: list[str] = []
        skipped: list[str] = []

        def report(locale_code: str, error: str | None = None) -> None:
            if progress is None:
                return
            processed = len(completed)
            progress(
                SaveProgress(
                    locale_code=locale_code,
                    processed_count=processed,
                    total_count=total,
                    is_complete=error is None and processed == total,
                    error=error,
                )
            )

        async def save_one(locale_code: str, translations: Mapping[str, str]) -> None:
            async with semaphore:
                if failures:
                    skipped.append(locale_code)
                    report(locale_code, SKIPPED_AFTER_FAILURE)
                    return
                try:
                    _ = await asyncio.to_thread(
                        self.save_locale_file,
                        directory,
                        locale_code,
                        translations,
                        create_backup,
                    )
                except Exception as e:
                    failures[locale_code] = str(e)
                    logger.error(f"Failed to save {locale_code}: {e}")
                    report(locale_code, str(e))
                    return
                completed.append(locale_code)
                report(locale_code)

        _ = await asyncio.gather(
            *(
                save_one(locale_code, translations)
                for locale_code, translations in canonical_translations.items()
            )
        )

        if failures:
            raise BatchSaveError(failures, completed=completed, skipped=skipped)
        return completed

    def write_gt_file(
        self,
        directory: str,
        base_locale: str,
        translations: Mapping[str, str],
        create_backup: bool = False,
    ) -> str:
        """
        Regenerate the GT file of a base locale from scratch.

        The guard covers every non-English locale sharing the base locale
        (``locale == "esES" or locale == "esMX"``).

        Raises:
            LocalizationNotFoundError: If the directory does not exist
            InvalidLocaleError: If no supported locale uses ``base_locale``
        """
        self._require_directory(directory)
        locale_codes = [
            code
            for code in get_locales_for_base(base_locale)
            if not is_english_locale(code)
        ]
        if not locale_codes:
            raise InvalidLocaleError(base_locale)

        file_path = str(PurePath(directory) / get_gt_file_name(base_locale))
        if create_backup and self.file_system.file_exists(file_path):
            _ = self.create_backup(file_path)

        lines = self.synthesizer.new_file(locale_codes, translations, spacer="")
        self.file_system.write_lines(file_path, lines)
        logger.info(f"Wrote GT file {file_path}")
        return file_path

    def list_backups(self, directory: str, locale_code: str) -> list[str]:
        """Backups of a locale file, oldest first."""
        self._require_directory(directory)
        file_name = get_locale_file_name(
            normalize_locale_code(locale_code) or locale_code
        )
        pattern = f"{file_name}.*{BACKUP_EXTENSION}"
        return sorted(
            path
            for path in self.file_system.get_files(directory, pattern)
            if fnmatch(PurePath(path).name, pattern)
        )

    def delete_backups(self, directory: str, locale_code: str) -> int:
        """
        Delete every backup of a locale file.

        Returns:
            Number of backups deleted; 0 when the directory does not exist
        """
        if not self.file_system.directory_exists(directory):
            return 0
        backups = self.list_backups(directory, locale_code)
        for backup_path in backups:
            self.file_system.delete_file(backup_path)
        if backups:
            logger.info(f"Deleted {len(backups)} backups of {locale_code}")
        return len(backups)

    def restore_from_backup(self, directory: str, locale_code: str) -> str:
        """
        Restore a locale file from its most recent backup.

        Returns:
            Path of the backup that was restored

        Raises:
            LocalizationNotFoundError: If the directory or a backup is missing
        """
        locale_code = normalize_locale_code(locale_code) or locale_code
        backups = self.list_backups(directory, locale_code)
        if not backups:
            raise LocalizationNotFoundError(
                f"No backup found for {get_locale_file_name(locale_code)}",
                str(PurePath(directory) / get_locale_file_name(locale_code)),
            )

        latest = backups[-1]
        file_path = self.locale_file_path(directory, locale_code)
        self.file_system.write_text(file_path, self.file_system.read_text(latest))
        logger.info(f"Restored {file_path} from {latest}")
        return latest
