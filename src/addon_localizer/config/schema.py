"""Configuration schema for Addon Localizer using nested Pydantic models."""

import re
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScanConfig(BaseModel):
    """Source scanning configuration."""

    lookup_identifier: str = Field(
        default="L",
        description="Name of the localization table referenced as L[\"key\"]",
        min_length=1,
    )
    source_pattern: str = Field(
        default="*.lua",
        description="Glob pattern for source files",
    )
    exclude_subdirectories: list[str] = Field(
        default_factory=lambda: ["Libs", "Localization"],
        description="Subdirectories (relative to the addon root) that are not scanned",
    )
    template_functions: list[str] = Field(
        default_factory=lambda: ["string.format"],
        description="Formatting calls whose first argument is a template string",
    )
    location_cap: Annotated[int, Field(ge=1, le=10000)] = Field(
        default=100,
        description="Maximum number of locations stored per glue string",
    )

    @field_validator("lookup_identifier")
    @classmethod
    def validate_lookup_identifier(cls, v: str) -> str:
        """Validate that the lookup identifier is a Lua name."""
        if not re.match(r"^[A-Za-z_][A-Za-z0-9_]*$", v):
            raise ValueError(f"Lookup identifier must be a Lua identifier, got: {v}")
        return v


class LocaleFilesConfig(BaseModel):
    """Locale file reading and writing configuration."""

    directory: str = Field(
        default="Localization",
        description="Localization directory, relative to the addon root",
        min_length=1,
    )
    create_backups: bool = Field(
        default=True,
        description="Whether to back up a locale file before overwriting it",
    )
    addon_namespace: str = Field(
        default="TRB",
        description="Addon table name bound in new locale files (local _, TRB = ...)",
        min_length=1,
    )
    table_expression: str = Field(
        default="TRB.Localization",
        description="Expression the lookup identifier is bound to in new locale files",
        min_length=1,
    )
    gt_exclude_patterns: list[str] = Field(
        default_factory=lambda: ["GT.lua"],
        description="File name suffixes skipped when loading primary locale files",
    )
    max_concurrent_saves: Annotated[int, Field(ge=1, le=32)] = Field(
        default=4,
        description="Maximum number of locale files saved at the same time",
    )


class TranslationConfig(BaseModel):
    """Machine translation provider configuration."""

    api_key: str | None = Field(
        default=None,
        description="Google Cloud Translation API key (falls back to GOOGLE_TRANSLATE_API_KEY)",
    )
    endpoint: str = Field(
        default="https://translation.googleapis.com/language/translate/v2",
        description="Translation v2 REST endpoint",
        pattern=r"^https?://.*",
    )
    batch_size: Annotated[int, Field(ge=1, le=128)] = Field(
        default=100,
        description="Texts per translation request",
    )
    batch_delay_seconds: Annotated[float, Field(ge=0, le=60)] = Field(
        default=0.1,
        description="Pause between translation requests",
    )
    timeout_seconds: Annotated[float, Field(gt=0, le=300)] = Field(
        default=30.0,
        description="HTTP timeout for translation requests",
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Normalize the endpoint URL."""
        return v.rstrip("/")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path (rotated at 5 MB)",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class AddonLocalizerConfig(BaseModel):
    """
    Configuration model for Addon Localizer with nested structure.

    Every section has defaults, so an empty configuration file is valid.
    """

    scan: ScanConfig = Field(default_factory=ScanConfig)
    locale_files: LocaleFilesConfig = Field(default_factory=LocaleFilesConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config: ClassVar[ConfigDict] = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
        frozen=False,
    )
