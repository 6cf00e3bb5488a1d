"""
Basic exception classes for Addon Localizer.

This module contains fundamental exception classes that are used throughout
the codebase without creating import cycles.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    BATCH = "batch"
    PROVIDER = "provider"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class AddonLocalizerError(Exception):
    """Base exception class for Addon Localizer specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class LocalizationNotFoundError(AddonLocalizerError, FileNotFoundError):
    """A file or directory passed to an entry point does not exist."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.HIGH,
            user_message=user_message,
            context=path,
            recoverable=False,
        )
        self.path: str | None = path


class InvalidLocaleError(AddonLocalizerError, ValueError):
    """An unrecognized locale code was passed to an operation."""

    def __init__(self, locale_code: str, user_message: str | None = None) -> None:
        super().__init__(
            f"Invalid locale code: {locale_code}",
            category=ErrorCategory.INVALID_ARGUMENT,
            severity=ErrorSeverity.LOW,
            user_message=user_message,
            context=locale_code,
            recoverable=False,
        )
        self.locale_code: str = locale_code


class BatchSaveError(AddonLocalizerError):
    """One or more locale files failed to save during a batch operation."""

    def __init__(
        self,
        failures: Mapping[str, str],
        completed: list[str] | None = None,
        skipped: list[str] | None = None,
    ) -> None:
        failed_codes = ", ".join(sorted(failures))
        super().__init__(
            f"Failed to save {len(failures)} locale file(s): {failed_codes}",
            category=ErrorCategory.BATCH,
            severity=ErrorSeverity.HIGH,
            context=dict(failures),
            recoverable=True,
        )
        self.failures: dict[str, str] = dict(failures)
        self.completed: list[str] = list(completed or [])
        self.skipped: list[str] = list(skipped or [])


class TranslationProviderError(AddonLocalizerError):
    """Translation provider is unavailable or misconfigured."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PROVIDER,
            severity=ErrorSeverity.MEDIUM,
            user_message=user_message,
            context=context,
            recoverable=True,
        )


class ConfigurationError(AddonLocalizerError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )
