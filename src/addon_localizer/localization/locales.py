"""
Locale catalog for World of Warcraft addon localization.

Static reference data: the supported client locales, their display names,
and how they group into base locales for machine-assisted ("GT")
translation files. Everything here is read-only and initialized once at
import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple


@dataclass(frozen=True, slots=True)
class LocaleInfo:
    """A supported client locale."""

    code: str
    display_name: str
    sort_order: int


class BaseLocaleMapping(NamedTuple):
    """Base locale grouping and translation-provider language for a locale."""

    base_locale: str
    provider_language: str


SUPPORTED_LOCALES: tuple[LocaleInfo, ...] = (
    LocaleInfo("enUS", "English (US)", 0),
    LocaleInfo("enGB", "English (GB)", 1),
    LocaleInfo("enTW", "English (TW)", 2),
    LocaleInfo("enCN", "English (CN)", 3),
    LocaleInfo("deDE", "German", 4),
    LocaleInfo("esES", "Spanish (ES)", 5),
    LocaleInfo("esMX", "Spanish (MX)", 6),
    LocaleInfo("frFR", "French", 7),
    LocaleInfo("itIT", "Italian", 8),
    LocaleInfo("koKR", "Korean", 9),
    LocaleInfo("ptBR", "Portuguese (BR)", 10),
    LocaleInfo("ptPT", "Portuguese (PT)", 11),
    LocaleInfo("ruRU", "Russian", 12),
    LocaleInfo("zhCN", "Chinese (Simplified)", 13),
    LocaleInfo("zhTW", "Chinese (Traditional)", 14),
)

# The base file every other locale is translated from
SOURCE_LOCALE = "enUS"

LOCALE_TO_BASE: MappingProxyType[str, BaseLocaleMapping] = MappingProxyType(
    {
        "enUS": BaseLocaleMapping("en", "en"),
        "enGB": BaseLocaleMapping("en", "en"),
        "enTW": BaseLocaleMapping("en", "en"),
        "enCN": BaseLocaleMapping("en", "en"),
        "deDE": BaseLocaleMapping("de", "de"),
        "esES": BaseLocaleMapping("es", "es"),
        "esMX": BaseLocaleMapping("es", "es"),
        "frFR": BaseLocaleMapping("fr", "fr"),
        "itIT": BaseLocaleMapping("it", "it"),
        "koKR": BaseLocaleMapping("ko", "ko"),
        "ptBR": BaseLocaleMapping("pt", "pt"),
        "ptPT": BaseLocaleMapping("pt", "pt"),
        "ruRU": BaseLocaleMapping("ru", "ru"),
        "zhCN": BaseLocaleMapping("zh", "zh-CN"),
        "zhTW": BaseLocaleMapping("zh-TW", "zh-TW"),
    }
)

_LOCALES_BY_FOLDED_CODE: MappingProxyType[str, LocaleInfo] = MappingProxyType(
    {info.code.casefold(): info for info in SUPPORTED_LOCALES}
)

# Chinese GT files keep the full client locale in their name
_GT_FILE_NAME_OVERRIDES: MappingProxyType[str, str] = MappingProxyType(
    {"zh": "zhCN-GT.lua", "zh-TW": "zhTW-GT.lua"}
)

LOCALE_FILE_EXTENSION = ".lua"


def get_locale(locale_code: str) -> LocaleInfo | None:
    """Look up a supported locale, ignoring case."""
    return _LOCALES_BY_FOLDED_CODE.get(locale_code.casefold())


def is_valid_locale(locale_code: str) -> bool:
    """Check whether a locale code is supported."""
    return get_locale(locale_code) is not None


def normalize_locale_code(locale_code: str) -> str | None:
    """Return the canonical spelling of a locale code (``"dede"`` -> ``"deDE"``)."""
    info = get_locale(locale_code)
    return info.code if info else None


def is_english_locale(locale_code: str) -> bool:
    """English locales are the translation source and never get GT files."""
    return locale_code.casefold().startswith("en")


def get_base_locale(locale_code: str) -> str | None:
    """Return the base locale a client locale belongs to."""
    canonical = normalize_locale_code(locale_code)
    if canonical is None:
        return None
    return LOCALE_TO_BASE[canonical].base_locale


def get_gt_file_suffix(locale_code: str) -> str:
    """
    Get the GT file suffix for a locale (e.g. ``"de-GT"`` for deDE).

    Returns an empty string for unknown locales.
    """
    base_locale = get_base_locale(locale_code)
    return f"{base_locale}-GT" if base_locale else ""


def get_gt_base_locales() -> list[str]:
    """All distinct non-English base locales, in catalog order."""
    bases: list[str] = []
    for code, mapping in LOCALE_TO_BASE.items():
        if is_english_locale(code):
            continue
        if mapping.base_locale not in bases:
            bases.append(mapping.base_locale)
    return bases


def get_provider_language_code(base_locale: str) -> str | None:
    """Get the translation-provider language code for a base locale."""
    for mapping in LOCALE_TO_BASE.values():
        if mapping.base_locale == base_locale:
            return mapping.provider_language
    return None


def get_locales_for_base(base_locale: str) -> list[str]:
    """All client locales sharing a base locale (``"pt"`` -> ptBR, ptPT)."""
    return [
        code
        for code, mapping in LOCALE_TO_BASE.items()
        if mapping.base_locale == base_locale
    ]


def get_gt_file_name(base_locale: str) -> str:
    """
    Get the GT file name for a base locale.

    Chinese locales use client locale codes (zhCN-GT.lua, zhTW-GT.lua);
    everything else uses the base locale (es-GT.lua, pt-GT.lua, ...).
    """
    override = _GT_FILE_NAME_OVERRIDES.get(base_locale)
    if override is not None:
        return override
    return f"{base_locale}-GT{LOCALE_FILE_EXTENSION}"


def get_locale_file_name(locale_code: str) -> str:
    """File name of a primary locale file (``deDE.lua``)."""
    return f"{locale_code}{LOCALE_FILE_EXTENSION}"
