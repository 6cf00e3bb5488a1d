"""
Filling the GT namespace of a data set with machine translations.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field

from ..localization.dataset import LocalizationDataSet, TranslationEdit, apply_edits
from ..localization.keys import KeySet, sort_keys
from ..localization.locales import SOURCE_LOCALE, get_provider_language_code
from ..utils.core.exceptions import InvalidLocaleError
from .provider import TranslationProgressCallback, TranslationProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GTUpdateResult:
    """Outcome of a GT update for one base locale."""

    dataset: LocalizationDataSet
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


async def update_gt_translations(
    dataset: LocalizationDataSet,
    provider: TranslationProvider,
    base_locale: str,
    valid_keys: Collection[str] | None = None,
    source_locale: str = SOURCE_LOCALE,
    progress: TranslationProgressCallback | None = None,
) -> GTUpdateResult:
    """
    Translate source texts that the GT namespace of a base locale lacks.

    Existing GT translations are never overwritten. When ``valid_keys`` is
    given, GT entries for keys outside it are dropped and only valid keys
    are translated. The input data set is left unchanged.

    Args:
        dataset: Loaded data set holding the source locale
        provider: Machine translation backend
        base_locale: GT bucket to fill (``"de"``, ``"zh-TW"``, ...)
        valid_keys: Keys referenced by the scanned sources
        source_locale: Locale whose text is translated
        progress: Optional batch progress callback

    Raises:
        InvalidLocaleError: If ``base_locale`` has no provider language
        TranslationProviderError: If the provider is not configured
    """
    target_language = get_provider_language_code(base_locale)
    if target_language is None:
        raise InvalidLocaleError(base_locale)

    updated = dataset.copy()
    removed: list[str] = []
    if valid_keys is not None:
        valid = valid_keys if isinstance(valid_keys, KeySet) else KeySet(valid_keys)
        removed = updated.get_orphaned_keys_for_gt_locale(base_locale, valid)
        _ = updated.remove_orphaned_keys_from_gt_locale(base_locale, valid)
    else:
        valid = None

    source_data = updated.get_locale_data(source_locale) or {}
    missing = [
        key
        for key, text in source_data.items()
        if text.strip()
        and not updated.has_gt_translation(key, base_locale)
        and (valid is None or key in valid)
    ]
    if not missing:
        logger.info(f"No missing GT translations for {base_locale}")
        return GTUpdateResult(dataset=updated, removed=removed)

    translations = await provider.translate_batch(
        (source_data[key] for key in missing), target_language, progress
    )

    edits = [
        TranslationEdit(
            key=key,
            locale_code=base_locale,
            value=translations[source_data[key]],
            machine=True,
        )
        for key in sort_keys(missing)
        if source_data[key] in translations
    ]
    logger.info(
        f"Added {len(edits)} GT translations for {base_locale}, removed {len(removed)}"
    )
    return GTUpdateResult(
        dataset=apply_edits(updated, edits),
        added=[edit.key for edit in edits],
        removed=removed,
    )
