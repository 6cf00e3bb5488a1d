"""
Machine translation for Addon Localizer.

This package defines the translation provider contract, ships a Google
Cloud Translation implementation, and fills the GT namespace of a data set
from the source locale.
"""

from .google import GoogleTranslateProvider
from .gt_update import GTUpdateResult, update_gt_translations
from .provider import TranslationProgress, TranslationProvider

__all__ = [
    "GTUpdateResult",
    "GoogleTranslateProvider",
    "TranslationProgress",
    "TranslationProvider",
    "update_gt_translations",
]
