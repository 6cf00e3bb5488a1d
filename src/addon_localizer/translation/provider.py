"""
Translation provider contract.

Any machine translation backend that satisfies ``TranslationProvider`` can
fill the GT namespace of a ``LocalizationDataSet``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class TranslationProgress:
    """Progress of a batch translation, reported after each request."""

    processed_count: int
    total_count: int
    current_text: str | None = None
    error: str | None = None

    @property
    def percent_complete(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return self.processed_count / self.total_count * 100


TranslationProgressCallback = Callable[[TranslationProgress], None]


@runtime_checkable
class TranslationProvider(Protocol):
    """Machine translation backend."""

    @property
    def is_configured(self) -> bool: ...

    async def translate(self, text: str, target_language: str) -> str | None:
        """Translate one text; None when the translation failed."""
        ...

    async def translate_batch(
        self,
        texts: Iterable[str],
        target_language: str,
        progress: TranslationProgressCallback | None = None,
    ) -> dict[str, str]:
        """Translate many texts, returning source text -> translation."""
        ...
