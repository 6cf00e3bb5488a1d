"""
In-memory multi-locale translation store.

Holds one key -> text map per loaded locale, a separate namespace of
machine-assisted ("GT") translations per base locale, and the duplicate
assignments found while loading. Loading never deletes anything; orphan
removal and edits are explicit operations.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass

from ..utils.core.exceptions import InvalidLocaleError
from .keys import KeyMap, KeySet, sort_keys
from .locales import (
    get_base_locale,
    get_gt_file_name,
    get_locale_file_name,
    normalize_locale_code,
)
from .models import DuplicateEntry

logger = logging.getLogger(__name__)


def _as_key_set(keys: Collection[str]) -> KeySet:
    return keys if isinstance(keys, KeySet) else KeySet(keys)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class LocalizationDataSet:
    """Translations for every loaded locale plus the GT namespace."""

    def __init__(self) -> None:
        self._translations: KeyMap[KeyMap[str]] = KeyMap()
        self._gt_translations: KeyMap[KeyMap[str]] = KeyMap()
        self._duplicates: KeyMap[KeyMap[DuplicateEntry]] = KeyMap()
        # Every key seen in any loaded locale
        self.all_keys: KeySet = KeySet()

    def add_locale(
        self,
        locale_code: str,
        translations: Mapping[str, str],
        duplicates: Mapping[str, DuplicateEntry] | None = None,
    ) -> None:
        """Add (or replace) the translations of a locale."""
        self._translations[locale_code] = KeyMap(translations)
        self._duplicates[locale_code] = KeyMap(duplicates or {})
        self.all_keys.update(translations)

    def add_gt_locale(self, base_locale: str, translations: Mapping[str, str]) -> None:
        """Add (or replace) the machine-assisted translations of a base locale."""
        self._gt_translations[base_locale] = KeyMap(translations)

    # Queries

    def get_translation(self, key: str, locale_code: str) -> str | None:
        """Translation of ``key``; None when the locale or the key is missing."""
        locale_data = self._translations.get(locale_code)
        return locale_data.get(key) if locale_data is not None else None

    def get_gt_translation(self, key: str, base_locale: str) -> str | None:
        locale_data = self._gt_translations.get(base_locale)
        return locale_data.get(key) if locale_data is not None else None

    def has_gt_translation(self, key: str, base_locale: str) -> bool:
        locale_data = self._gt_translations.get(base_locale)
        return locale_data is not None and key in locale_data

    def get_locale_data(self, locale_code: str) -> KeyMap[str] | None:
        return self._translations.get(locale_code)

    def get_gt_locale_data(self, base_locale: str) -> KeyMap[str] | None:
        return self._gt_translations.get(base_locale)

    @property
    def loaded_locales(self) -> list[str]:
        return list(self._translations)

    @property
    def loaded_gt_locales(self) -> list[str]:
        return list(self._gt_translations)

    def get_translation_count(self, locale_code: str) -> int:
        locale_data = self._translations.get(locale_code)
        return len(locale_data) if locale_data is not None else 0

    def get_gt_translation_count(self, base_locale: str) -> int:
        locale_data = self._gt_translations.get(base_locale)
        return len(locale_data) if locale_data is not None else 0

    def has_locale(self, locale_code: str) -> bool:
        return locale_code in self._translations

    def has_gt_locale(self, base_locale: str) -> bool:
        return base_locale in self._gt_translations

    def get_coverage_percentage(self, locale_code: str) -> float:
        """
        Percentage of all known keys that have a non-empty translation.

        Returns 0.0 when no keys are known.
        """
        if not self.all_keys:
            return 0.0
        locale_data = self._translations.get(locale_code)
        if locale_data is None:
            return 0.0
        translated = sum(1 for value in locale_data.values() if not _is_blank(value))
        return translated / len(self.all_keys) * 100

    # Duplicates

    def has_duplicates(self, locale_code: str | None = None) -> bool:
        if locale_code is not None:
            return bool(self._duplicates.get(locale_code))
        return any(self._duplicates.values())

    def get_duplicates(self, locale_code: str) -> list[DuplicateEntry]:
        duplicates = self._duplicates.get(locale_code)
        return list(duplicates.values()) if duplicates is not None else []

    def get_all_duplicates(self) -> dict[str, list[DuplicateEntry]]:
        """Duplicates per locale, leaving out locales that have none."""
        return {
            locale_code: list(duplicates.values())
            for locale_code, duplicates in self._duplicates.items()
            if duplicates
        }

    @property
    def total_duplicate_count(self) -> int:
        return sum(len(duplicates) for duplicates in self._duplicates.values())

    # Orphans

    def get_orphaned_keys_for_locale(
        self, locale_code: str, valid_keys: Collection[str]
    ) -> list[str]:
        """Keys stored for a locale that no scanned source references."""
        return _orphaned_keys(self._translations.get(locale_code), valid_keys)

    def get_orphaned_keys_for_gt_locale(
        self, base_locale: str, valid_keys: Collection[str]
    ) -> list[str]:
        return _orphaned_keys(self._gt_translations.get(base_locale), valid_keys)

    def get_orphaned_entries_by_file(
        self, valid_keys: Collection[str]
    ) -> dict[str, list[str]]:
        """
        Orphaned keys grouped by the file that holds them.

        Returns:
            Mapping of locale or GT file name to sorted orphaned keys; files
            without orphans are left out
        """
        valid = _as_key_set(valid_keys)
        entries: dict[str, list[str]] = {}
        for locale_code in self._translations:
            orphans = self.get_orphaned_keys_for_locale(locale_code, valid)
            if orphans:
                entries[get_locale_file_name(locale_code)] = orphans
        for base_locale in self._gt_translations:
            orphans = self.get_orphaned_keys_for_gt_locale(base_locale, valid)
            if orphans:
                entries[get_gt_file_name(base_locale)] = orphans
        return entries

    def remove_orphaned_keys_from_locale(
        self, locale_code: str, valid_keys: Collection[str]
    ) -> int:
        """Delete orphaned keys from a locale; returns how many were removed."""
        removed = _remove_orphans(self._translations.get(locale_code), valid_keys)
        if removed:
            logger.debug(f"Removed {removed} orphaned keys from {locale_code}")
        return removed

    def remove_orphaned_keys_from_gt_locale(
        self, base_locale: str, valid_keys: Collection[str]
    ) -> int:
        removed = _remove_orphans(self._gt_translations.get(base_locale), valid_keys)
        if removed:
            logger.debug(f"Removed {removed} orphaned GT keys from {base_locale}")
        return removed

    # Copies and edits

    def copy(self) -> LocalizationDataSet:
        """Copy with independent maps; entries themselves are immutable."""
        clone = LocalizationDataSet()
        for locale_code, translations in self._translations.items():
            clone._translations[locale_code] = translations.copy()
        for base_locale, translations in self._gt_translations.items():
            clone._gt_translations[base_locale] = translations.copy()
        for locale_code, duplicates in self._duplicates.items():
            clone._duplicates[locale_code] = duplicates.copy()
        clone.all_keys = self.all_keys.copy()
        return clone

    def _set_translation(self, key: str, locale_code: str, value: str) -> None:
        locale_data = self._translations.get(locale_code)
        if locale_data is None:
            locale_data = KeyMap()
            self._translations[locale_code] = locale_data
            self._duplicates[locale_code] = KeyMap()
        locale_data[key] = value
        self.all_keys.add(key)

    def _set_gt_translation(self, key: str, base_locale: str, value: str) -> None:
        locale_data = self._gt_translations.get(base_locale)
        if locale_data is None:
            locale_data = KeyMap()
            self._gt_translations[base_locale] = locale_data
        locale_data[key] = value


def _orphaned_keys(
    translations: KeyMap[str] | None, valid_keys: Collection[str]
) -> list[str]:
    if translations is None:
        return []
    valid = _as_key_set(valid_keys)
    return sort_keys(key for key in translations if key not in valid)


def _remove_orphans(translations: KeyMap[str] | None, valid_keys: Collection[str]) -> int:
    orphans = _orphaned_keys(translations, valid_keys)
    if translations is None:
        return 0
    for key in orphans:
        del translations[key]
    return len(orphans)


@dataclass(frozen=True, slots=True)
class TranslationEdit:
    """
    A single change to a translation.

    An empty ``value`` marks the key for deletion on the next save. Machine
    edits go to the GT namespace of the locale's base locale.
    """

    key: str
    locale_code: str
    value: str
    machine: bool = False


def apply_edits(
    dataset: LocalizationDataSet, edits: Iterable[TranslationEdit]
) -> LocalizationDataSet:
    """
    Apply edits to a copy of ``dataset``.

    Raises:
        InvalidLocaleError: If an edit targets an unsupported locale
    """
    edited = dataset.copy()
    for edit in edits:
        if edit.machine:
            base_locale = get_base_locale(edit.locale_code) or edit.locale_code
            edited._set_gt_translation(edit.key, base_locale, edit.value)  # pyright: ignore[reportPrivateUsage]
            continue

        locale_code = normalize_locale_code(edit.locale_code)
        if locale_code is None:
            raise InvalidLocaleError(edit.locale_code)
        edited._set_translation(edit.key, locale_code, edit.value)  # pyright: ignore[reportPrivateUsage]
    return edited


def gt_promotion_edits(
    dataset: LocalizationDataSet,
    locale_code: str,
    keys: Iterable[str] | None = None,
) -> list[TranslationEdit]:
    """
    Build edits that copy GT translations into a locale.

    Args:
        dataset: Data set holding the GT translations
        locale_code: Locale receiving the promoted translations
        keys: Keys to promote; by default every GT key the locale lacks

    Raises:
        InvalidLocaleError: If ``locale_code`` is not a supported locale
    """
    base_locale = get_base_locale(locale_code)
    if base_locale is None:
        raise InvalidLocaleError(locale_code)

    gt_data = dataset.get_gt_locale_data(base_locale)
    if gt_data is None:
        return []

    if keys is None:
        candidates = [
            key
            for key in gt_data
            if _is_blank(dataset.get_translation(key, locale_code))
        ]
    else:
        candidates = [key for key in keys if key in gt_data]

    edits: list[TranslationEdit] = []
    for key in sort_keys(candidates):
        value = gt_data[key]
        if not _is_blank(value):
            edits.append(
                TranslationEdit(
                    key=gt_data.original_key(key) or key,
                    locale_code=locale_code,
                    value=value,
                )
            )
    return edits
