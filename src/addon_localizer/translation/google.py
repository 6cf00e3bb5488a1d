"""
Google Cloud Translation (v2 REST API) provider.

Texts are sent in batches of up to 100 with a short pause between batches.
A failed batch is reported through the progress callback and skipped so
one bad request does not lose the rest of a large run.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeAlias, cast

import httpx

from ..utils.core.exceptions import TranslationProviderError
from .provider import TranslationProgress, TranslationProgressCallback

if TYPE_CHECKING:
    from types import TracebackType

APIResponseDict: TypeAlias = dict[str, object]

logger = logging.getLogger(__name__)

API_KEY_ENVIRONMENT_VARIABLE = "GOOGLE_TRANSLATE_API_KEY"
DEFAULT_ENDPOINT = "https://translation.googleapis.com/language/translate/v2"
SOURCE_LANGUAGE = "en"
# Google accepts at most 128 segments per request
DEFAULT_BATCH_SIZE = 100
DEFAULT_BATCH_DELAY = 0.1


class GoogleTranslateProvider:
    """Translate text through the Google Cloud Translation v2 endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        timeout: float = 30.0,
        max_retries: int = 3,
        source_language: str = SOURCE_LANGUAGE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider; the API key falls back to the environment."""
        self.api_key: str | None = api_key or os.environ.get(API_KEY_ENVIRONMENT_VARIABLE)
        self.endpoint: str = endpoint
        self.batch_size: int = max(1, batch_size)
        self.batch_delay: float = batch_delay
        self.timeout: float = timeout
        self.max_retries: int = max_retries
        self.source_language: str = source_language
        self._transport: httpx.AsyncBaseTransport | None = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    async def __aenter__(self) -> GoogleTranslateProvider:
        """Enter async context and open a shared HTTP client."""
        self._client = self._create_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise TranslationProviderError(
                "Google Translate provider is not configured",
                user_message=f"Set the {API_KEY_ENVIRONMENT_VARIABLE} environment "
                "variable or translation.api_key in the configuration file.",
            )

    async def translate(self, text: str, target_language: str) -> str | None:
        """
        Translate a single text.

        Returns:
            The translation, the input itself when it is blank, or None if
            the request failed

        Raises:
            TranslationProviderError: If no API key is configured
        """
        self._require_configured()
        if not text.strip():
            return text

        try:
            translations = await self._request([text], target_language)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Translation to {target_language} failed: {e}")
            return None
        return translations[0]

    async def translate_batch(
        self,
        texts: Iterable[str],
        target_language: str,
        progress: TranslationProgressCallback | None = None,
    ) -> dict[str, str]:
        """
        Translate distinct non-blank texts in batches.

        Returns:
            Mapping of source text to translation for every text that
            translated successfully

        Raises:
            TranslationProviderError: If no API key is configured
        """
        self._require_configured()

        unique_texts = list(dict.fromkeys(text for text in texts if text.strip()))
        total = len(unique_texts)
        results: dict[str, str] = {}
        if total == 0:
            return results

        logger.info(f"Translating {total} texts to {target_language}")
        processed = 0
        for start in range(0, total, self.batch_size):
            batch = unique_texts[start : start + self.batch_size]
            try:
                translations = await self._request(batch, target_language)
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Batch translation to {target_language} failed: {e}")
                if progress is not None:
                    progress(
                        TranslationProgress(
                            processed_count=processed,
                            total_count=total,
                            error=str(e),
                        )
                    )
                continue

            results.update(zip(batch, translations, strict=True))
            processed += len(batch)
            if progress is not None:
                progress(
                    TranslationProgress(
                        processed_count=processed,
                        total_count=total,
                        current_text=batch[-1],
                    )
                )
            logger.debug(f"Batch complete: {processed}/{total}")

            if start + self.batch_size < total and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        logger.info(f"Translated {len(results)}/{total} texts to {target_language}")
        return results

    async def _request(self, texts: list[str], target_language: str) -> list[str]:
        if self._client is not None:
            return await self._post(self._client, texts, target_language)
        async with self._create_client() as client:
            return await self._post(client, texts, target_language)

    async def _post(
        self, client: httpx.AsyncClient, texts: list[str], target_language: str
    ) -> list[str]:
        """POST one batch with retry on timeouts."""
        payload: APIResponseDict = {
            "q": texts,
            "target": target_language,
            "source": self.source_language,
            "format": "text",
        }

        for attempt in range(self.max_retries + 1):
            try:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key or ""},
                    json=payload,
                )
                _ = response.raise_for_status()
                return _parse_translations(response.json(), len(texts))  # pyright: ignore[reportAny] # external API response
            except httpx.TimeoutException:
                if attempt < self.max_retries:
                    wait_time = 2.0**attempt
                    logger.warning(
                        "Request timeout (attempt %d/%d), retrying in %.1fs...",
                        attempt + 1,
                        self.max_retries + 1,
                        wait_time,
                    )
                    await asyncio.sleep(wait_time)
                else:
                    raise

        raise RuntimeError("Maximum retries exceeded")


def _parse_translations(response_json: object, expected: int) -> list[str]:
    """Extract ``translatedText`` values from a v2 response body."""
    if not isinstance(response_json, dict):
        raise ValueError("Invalid API response format: expected dict")
    response_data = cast(APIResponseDict, response_json)

    data = response_data.get("data")
    if not isinstance(data, dict):
        raise ValueError("Invalid API response format: missing data object")
    translations = cast(APIResponseDict, data).get("translations")
    if not isinstance(translations, list):
        raise ValueError("Invalid API response format: missing translations")

    texts: list[str] = []
    for item in cast(list[object], translations):
        if not isinstance(item, dict):
            raise ValueError("Invalid API response format: bad translation entry")
        translated = cast(APIResponseDict, item).get("translatedText")
        if not isinstance(translated, str):
            raise ValueError("Invalid API response format: missing translatedText")
        texts.append(translated)

    if len(texts) != expected:
        raise ValueError(
            f"Invalid API response format: expected {expected} translations, got {len(texts)}"
        )
    return texts
