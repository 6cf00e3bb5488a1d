"""Configuration manager for Addon Localizer.

This module loads YAML configuration files with Pydantic model validation
and writes the documented sample configuration.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..config.schema import AddonLocalizerConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.

    Provides methods for loading and validating configuration files and for
    creating the sample file.
    """

    @staticmethod
    def load_config(config_path: Path) -> AddonLocalizerConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            AddonLocalizerConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not contain a YAML mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        try:
            config = AddonLocalizerConfig.model_validate(config_data)
        except ValidationError:
            logger.error(f"Invalid configuration in {config_path}")
            raise

        logger.debug(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def get_default_config() -> AddonLocalizerConfig:
        """
        Get a configuration object with default values.

        Returns:
            AddonLocalizerConfig: Configuration with default values
        """
        return AddonLocalizerConfig()

    @staticmethod
    def create_sample_config(sample_path: Path, overwrite: bool = False) -> None:
        """
        Create a sample configuration file with all options and documentation.

        Args:
            sample_path: Path where to create the sample configuration file
            overwrite: Replace an existing file instead of refusing

        Raises:
            FileExistsError: If the file exists and overwrite is False
        """
        if sample_path.exists() and not overwrite:
            raise FileExistsError(f"Configuration file already exists: {sample_path}")

        _ = sample_path.parent.mkdir(parents=True, exist_ok=True)
        _ = sample_path.write_text(SAMPLE_CONFIG, encoding="utf-8")
        logger.info(f"Created sample configuration at {sample_path}")


SAMPLE_CONFIG = """# Addon Localizer Configuration File
# Every option has a default; remove anything you do not need to change.

# ============================================================================
# Source Scanning
# ============================================================================

scan:
  # Name of the localization table referenced as L["key"]
  lookup_identifier: L
  # Glob pattern for source files
  source_pattern: "*.lua"
  # Subdirectories (relative to the addon root) that are not scanned
  exclude_subdirectories:
    - Libs
    - Localization
  # Formatting calls whose first argument is a template string
  template_functions:
    - string.format
  # Maximum number of locations stored per glue string (1-10000)
  location_cap: 100

# ============================================================================
# Locale Files
# ============================================================================

locale_files:
  # Localization directory, relative to the addon root
  directory: Localization
  # Whether to back up a locale file before overwriting it
  create_backups: true
  # Addon table name bound in new locale files (local _, TRB = ...)
  addon_namespace: TRB
  # Expression the lookup identifier is bound to in new locale files
  table_expression: TRB.Localization
  # File name suffixes skipped when loading primary locale files
  gt_exclude_patterns:
    - GT.lua
  # Maximum number of locale files saved at the same time (1-32)
  max_concurrent_saves: 4

# ============================================================================
# Machine Translation
# ============================================================================

translation:
  # Google Cloud Translation API key (falls back to GOOGLE_TRANSLATE_API_KEY)
  api_key: null
  # Translation v2 REST endpoint
  endpoint: https://translation.googleapis.com/language/translate/v2
  # Texts per translation request (1-128)
  batch_size: 100
  # Pause between translation requests in seconds
  batch_delay_seconds: 0.1
  # HTTP timeout for translation requests in seconds
  timeout_seconds: 30.0

# ============================================================================
# Logging
# ============================================================================

logging:
  # DEBUG, INFO, WARNING, ERROR or CRITICAL
  level: INFO
  # Optional log file path (rotated at 5 MB)
  file: null
"""
