"""
Localization engine for Addon Localizer.

This package scans Lua addon sources for ``L["key"]`` glue strings, loads
per-locale translation files into a multi-locale data set, and regenerates
locale files while keeping their hand-maintained structure.
"""

from .dataset import (
    LocalizationDataSet,
    TranslationEdit,
    apply_edits,
    gt_promotion_edits,
)
from .extractor import (
    GlueStringExtractor,
    KeyReference,
    LineScan,
    has_concatenation_in_brackets,
)
from .filesystem import FileSystem, LocalFileSystem
from .format_specifiers import (
    FormatParameter,
    FormatParameterType,
    parse_format_specifiers,
)
from .keys import KeyMap, KeySet
from .locales import SUPPORTED_LOCALES, LocaleInfo
from .models import (
    DuplicateEntry,
    GlueInfo,
    GlueLocation,
    LocaleFileContents,
    ParseResult,
    merge_results,
)
from .parser import LuaLocalizationParser
from .synthesizer import LocaleFileSynthesizer
from .writer import LocalizationFileWriter, SaveProgress

__all__ = [
    "DuplicateEntry",
    "FileSystem",
    "FormatParameter",
    "FormatParameterType",
    "GlueInfo",
    "GlueLocation",
    "GlueStringExtractor",
    "KeyMap",
    "KeyReference",
    "KeySet",
    "LineScan",
    "LocaleFileContents",
    "LocaleFileSynthesizer",
    "LocaleInfo",
    "LocalFileSystem",
    "LocalizationDataSet",
    "LocalizationFileWriter",
    "LuaLocalizationParser",
    "ParseResult",
    "SUPPORTED_LOCALES",
    "SaveProgress",
    "TranslationEdit",
    "apply_edits",
    "gt_promotion_edits",
    "has_concatenation_in_brackets",
    "merge_results",
    "parse_format_specifiers",
]
