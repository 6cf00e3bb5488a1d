"""
Command-line entry point for Addon Localizer.

This module sets up logging, loads the optional YAML configuration, and
runs one maintenance command against an addon directory: reporting
translation status, cleaning orphaned or duplicated keys, refreshing
machine translations, or managing locale file backups. It can also write a
sample configuration file.
"""

import argparse
import logging
import logging.handlers
import sys
from collections.abc import Sequence
from pathlib import Path

from .config.manager import ConfigManager
from .config.schema import AddonLocalizerConfig
from .localization.dataset import LocalizationDataSet
from .localization.extractor import GlueStringExtractor
from .localization.keys import sort_keys
from .localization.locales import (
    SOURCE_LOCALE,
    get_gt_base_locales,
    get_locale_file_name,
)
from .localization.models import ParseResult
from .localization.parser import LuaLocalizationParser
from .localization.synthesizer import LocaleFileSynthesizer
from .localization.writer import LocalizationFileWriter, SaveProgress
from .translation.google import GoogleTranslateProvider
from .translation.gt_update import update_gt_translations
from .translation.provider import TranslationProgress
from .utils.core.exceptions import AddonLocalizerError, ConfigurationError

DEFAULT_CONFIG_FILE = Path("addon-localizer.yml")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure console logging and an optional rotating log file.

    Args:
        level: Level name for the console handler
        log_file: Path of a log file rotated at 5MB, or None for console only
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    simple_formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        _ = log_path.parent.mkdir(parents=True, exist_ok=True)
        # File handler with rotation (5MB max, keep 5 backups)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for Addon Localizer.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="addon-localizer",
        description="Addon Localizer - maintain L[\"key\"] locale files of a Lua addon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  addon-localizer report ./MyAddon
    Show key counts, coverage and duplicates per locale

  addon-localizer clean-orphans ./MyAddon
    Remove keys no source file uses from every locale file

  addon-localizer clean-duplicates ./MyAddon
    Collapse keys assigned more than once to their last value

  addon-localizer update-gt ./MyAddon de
    Machine-translate missing German entries into de-GT.lua

  addon-localizer init-config
    Write a documented addon-localizer.yml to the current directory

  addon-localizer restore ./MyAddon deDE
    Restore deDE.lua from its latest backup
        """,
    )
    _ = parser.add_argument(
        "--config",
        dest="config_file",
        type=Path,
        default=None,
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_FILE} if present)",
    )
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on the console",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Show translation status")
    _ = report.add_argument("addon_dir", type=Path, help="Addon root directory")

    clean = subparsers.add_parser(
        "clean-orphans", help="Remove unused keys from locale and GT files"
    )
    _ = clean.add_argument("addon_dir", type=Path, help="Addon root directory")
    _ = clean.add_argument(
        "--no-backup", action="store_true", help="Do not back up locale files"
    )

    duplicates = subparsers.add_parser(
        "clean-duplicates", help="Collapse repeated assignments of a key"
    )
    _ = duplicates.add_argument("addon_dir", type=Path, help="Addon root directory")
    _ = duplicates.add_argument(
        "--no-backup", action="store_true", help="Do not back up locale files"
    )

    update_gt = subparsers.add_parser(
        "update-gt", help="Fill a GT file with machine translations"
    )
    _ = update_gt.add_argument("addon_dir", type=Path, help="Addon root directory")
    _ = update_gt.add_argument(
        "base_locale",
        nargs="?",
        default=None,
        help="Base locale to update (de, es, ..., zh-TW); all when omitted",
    )

    restore = subparsers.add_parser(
        "restore", help="Restore a locale file from its latest backup"
    )
    _ = restore.add_argument("addon_dir", type=Path, help="Addon root directory")
    _ = restore.add_argument("locale", help="Locale code such as deDE")

    delete = subparsers.add_parser(
        "delete-backups", help="Delete every backup of a locale file"
    )
    _ = delete.add_argument("addon_dir", type=Path, help="Addon root directory")
    _ = delete.add_argument("locale", help="Locale code such as deDE")

    init_config = subparsers.add_parser(
        "init-config", help="Write a sample configuration file"
    )
    _ = init_config.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help=f"Where to write the file (default: {DEFAULT_CONFIG_FILE})",
    )
    _ = init_config.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )

    return parser


def load_configuration(config_file: Path | None) -> AddonLocalizerConfig:
    """
    Load the configuration file, falling back to defaults.

    An explicitly requested file must exist; the default file is optional.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    config_path = config_file or DEFAULT_CONFIG_FILE
    if not config_path.exists():
        if config_file is not None:
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        return ConfigManager.get_default_config()

    try:
        return ConfigManager.load_config(config_path)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load configuration: {e}",
            user_message=f"Please check {config_path} for errors: {e}",
        ) from e


class LocalizerSession:
    """Parser, writer and paths configured for one addon directory."""

    def __init__(self, addon_dir: Path, config: AddonLocalizerConfig) -> None:
        self.addon_dir: Path = addon_dir
        self.config: AddonLocalizerConfig = config
        self.localization_dir: Path = addon_dir / config.locale_files.directory

        self.parser: LuaLocalizationParser = LuaLocalizationParser(
            extractor=GlueStringExtractor(
                lookup_identifier=config.scan.lookup_identifier,
                template_functions=config.scan.template_functions,
                location_cap=config.scan.location_cap,
            )
        )
        self.writer: LocalizationFileWriter = LocalizationFileWriter(
            synthesizer=LocaleFileSynthesizer(
                lookup_identifier=config.scan.lookup_identifier,
                addon_namespace=config.locale_files.addon_namespace,
                table_expression=config.locale_files.table_expression,
            )
        )

    def scan_sources(self) -> ParseResult:
        """
        Scan the addon sources and the keys locale files reference.

        Format parameters of the enUS values are attached to the keys.
        """
        result = self.parser.parse_directory(
            str(self.addon_dir),
            exclude_subdirectories=self.config.scan.exclude_subdirectories,
            pattern=self.config.scan.source_pattern,
        )
        if self.parser.file_system.directory_exists(str(self.localization_dir)):
            for file_path in self.parser.file_system.get_files(
                str(self.localization_dir), "*.lua"
            ):
                result.add_reference_keys(self.parser.parse_localization_usages(file_path))

        source_file = self.localization_dir / get_locale_file_name(SOURCE_LOCALE)
        if self.parser.file_system.file_exists(str(source_file)):
            attached = result.attach_format_parameters(
                self.parser.parse_format_parameters(str(source_file))
            )
            logger.debug(f"Attached format parameters to {attached} keys")
        return result

    def load_dataset(self) -> LocalizationDataSet:
        """Load primary locale files and GT files."""
        dataset = self.parser.parse_localization_directory(
            str(self.localization_dir),
            exclude_patterns=self.config.locale_files.gt_exclude_patterns,
        )
        loaded = self.parser.load_gt_files(str(self.localization_dir), dataset)
        logger.debug(f"Loaded {loaded} GT files")
        return dataset


def print_save_progress(progress: SaveProgress) -> None:
    status = progress.error or "saved"
    print(
        f"[{progress.processed_count}/{progress.total_count}] "
        f"{progress.locale_code}: {status}"
    )


def run_report(session: LocalizerSession) -> int:
    """Print key counts, coverage and duplicates per locale."""
    result = session.scan_sources()
    dataset = session.load_dataset()
    valid_keys = result.keys()
    source_data = dataset.get_locale_data(SOURCE_LOCALE)

    print(f"Glue strings: {len(result)} ({result.total_occurrences} occurrences)")
    print(f"  concatenated: {len(result.concatenated)}")
    print(f"  used as templates: {len(result.with_template_call)}")
    for info in sorted(result.with_template_call, key=lambda item: item.key.casefold()):
        kinds = ", ".join(
            parameter.type.value
            for parameter in info.format_parameters
            if not parameter.is_percent
        )
        print(f"    {info.key}: {info.parameter_count} parameters ({kinds or 'none'})")

    if source_data is not None:
        missing = sort_keys(key for key in valid_keys if key not in source_data)
        print(f"Missing from {SOURCE_LOCALE}: {len(missing)}")
        for key in missing:
            print(f"  {key}")

    print("Locales:")
    for locale_code in dataset.loaded_locales:
        orphans = dataset.get_orphaned_keys_for_locale(locale_code, valid_keys)
        print(
            f"  {locale_code}: {dataset.get_translation_count(locale_code)} keys, "
            f"{dataset.get_coverage_percentage(locale_code):.1f}% coverage, "
            f"{len(orphans)} orphaned, "
            f"{len(dataset.get_duplicates(locale_code))} duplicated"
        )
        for duplicate in dataset.get_duplicates(locale_code):
            print(
                f"    duplicate {duplicate.key} x{duplicate.occurrence_count} "
                f"-> {duplicate.final_value!r}"
            )

    for base_locale in dataset.loaded_gt_locales:
        print(
            f"  GT {base_locale}: {dataset.get_gt_translation_count(base_locale)} keys"
        )
    return 0


async def run_clean_orphans(session: LocalizerSession, create_backup: bool) -> int:
    """Remove keys no source references from every locale and GT file."""
    valid_keys = session.scan_sources().keys()
    dataset = session.load_dataset()

    orphans_by_file = dataset.get_orphaned_entries_by_file(valid_keys)
    if not orphans_by_file:
        print("No orphaned keys found")
        return 0

    for file_name, keys in orphans_by_file.items():
        print(f"{file_name}: {len(keys)} orphaned")

    cleaned = dataset.copy()
    locale_translations: dict[str, dict[str, str]] = {}
    for locale_code in cleaned.loaded_locales:
        orphans = cleaned.get_orphaned_keys_for_locale(locale_code, valid_keys)
        if not orphans:
            continue
        _ = cleaned.remove_orphaned_keys_from_locale(locale_code, valid_keys)
        # An empty value drops the key from the rewritten file
        translations = dict(cleaned.get_locale_data(locale_code) or {})
        translations.update(dict.fromkeys(orphans, ""))
        locale_translations[locale_code] = translations

    if locale_translations:
        _ = await session.writer.save_multiple_locale_files(
            str(session.localization_dir),
            locale_translations,
            create_backup=create_backup,
            progress=print_save_progress,
            max_concurrency=session.config.locale_files.max_concurrent_saves,
        )

    for base_locale in cleaned.loaded_gt_locales:
        if cleaned.remove_orphaned_keys_from_gt_locale(base_locale, valid_keys):
            _ = session.writer.write_gt_file(
                str(session.localization_dir),
                base_locale,
                cleaned.get_gt_locale_data(base_locale) or {},
                create_backup=create_backup,
            )
    return 0


async def run_clean_duplicates(session: LocalizerSession, create_backup: bool) -> int:
    """Rewrite locale files so every key is assigned once, with its last value."""
    dataset = session.load_dataset()
    duplicated = [
        locale_code
        for locale_code in dataset.loaded_locales
        if dataset.has_duplicates(locale_code)
    ]
    if not duplicated:
        print("No duplicate entries found")
        return 0

    for locale_code in duplicated:
        print(f"{locale_code}: {len(dataset.get_duplicates(locale_code))} duplicated keys")

    _ = await session.writer.save_multiple_locale_files(
        str(session.localization_dir),
        {
            locale_code: dataset.get_locale_data(locale_code) or {}
            for locale_code in duplicated
        },
        create_backup=create_backup,
        progress=print_save_progress,
        max_concurrency=session.config.locale_files.max_concurrent_saves,
    )
    return 0


async def run_update_gt(session: LocalizerSession, base_locale: str | None) -> int:
    """Machine-translate source texts missing from GT files."""
    valid_keys = session.scan_sources().keys()
    dataset = session.load_dataset()
    if not dataset.has_locale(SOURCE_LOCALE):
        logger.error(f"No {SOURCE_LOCALE} locale file in {session.localization_dir}")
        return 1

    translation = session.config.translation

    def show_progress(progress: TranslationProgress) -> None:
        if progress.error:
            print(f"Batch failed: {progress.error}")
        else:
            print(f"Translated {progress.processed_count}/{progress.total_count}")

    async with GoogleTranslateProvider(
        api_key=translation.api_key,
        endpoint=translation.endpoint,
        batch_size=translation.batch_size,
        batch_delay=translation.batch_delay_seconds,
        timeout=translation.timeout_seconds,
    ) as provider:
        for base in [base_locale] if base_locale else get_gt_base_locales():
            update = await update_gt_translations(
                dataset, provider, base, valid_keys=valid_keys, progress=show_progress
            )
            dataset = update.dataset
            if not update.changed:
                print(f"{base}: up to date")
                continue
            file_path = session.writer.write_gt_file(
                str(session.localization_dir),
                base,
                dataset.get_gt_locale_data(base) or {},
                create_backup=session.config.locale_files.create_backups,
            )
            print(
                f"{base}: {len(update.added)} added, {len(update.removed)} removed "
                f"-> {file_path}"
            )
    return 0


def run_restore(session: LocalizerSession, locale_code: str) -> int:
    backup = session.writer.restore_from_backup(str(session.localization_dir), locale_code)
    print(f"Restored {locale_code} from {Path(backup).name}")
    return 0


def run_delete_backups(session: LocalizerSession, locale_code: str) -> int:
    deleted = session.writer.delete_backups(str(session.localization_dir), locale_code)
    print(f"Deleted {deleted} backup(s) of {locale_code}")
    return 0


def run_init_config(path: Path, force: bool) -> int:
    try:
        ConfigManager.create_sample_config(path, overwrite=force)
    except FileExistsError as e:
        logger.error(f"{e}; use --force to overwrite it")
        return 1
    print(f"Wrote sample configuration to {path}")
    return 0


async def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the Addon Localizer command line.

    Args:
        argv: Arguments to parse instead of ``sys.argv``

    Returns:
        Process exit code
    """
    args = create_argument_parser().parse_args(argv)
    config_file: Path | None = args.config_file  # pyright: ignore[reportAny]
    verbose: bool = args.verbose  # pyright: ignore[reportAny]
    command: str = args.command  # pyright: ignore[reportAny]

    if command == "init-config":
        setup_logging("DEBUG" if verbose else "INFO")
        path: Path = args.path  # pyright: ignore[reportAny]
        force: bool = args.force  # pyright: ignore[reportAny]
        return run_init_config(path, force)

    addon_dir: Path = args.addon_dir  # pyright: ignore[reportAny]

    try:
        config = load_configuration(config_file)
    except ConfigurationError as e:
        setup_logging("DEBUG" if verbose else "INFO")
        logger.error(e.user_message)
        return 1

    setup_logging("DEBUG" if verbose else config.logging.level, config.logging.file)
    session = LocalizerSession(addon_dir, config)

    try:
        match command:
            case "report":
                return run_report(session)
            case "clean-orphans":
                no_backup: bool = args.no_backup  # pyright: ignore[reportAny]
                create_backup = config.locale_files.create_backups and not no_backup
                return await run_clean_orphans(session, create_backup)
            case "clean-duplicates":
                no_backup = args.no_backup  # pyright: ignore[reportAny]
                create_backup = config.locale_files.create_backups and not no_backup
                return await run_clean_duplicates(session, create_backup)
            case "update-gt":
                base_locale: str | None = args.base_locale  # pyright: ignore[reportAny]
                return await run_update_gt(session, base_locale)
            case "restore":
                locale_code: str = args.locale  # pyright: ignore[reportAny]
                return run_restore(session, locale_code)
            case "delete-backups":
                locale_code = args.locale  # pyright: ignore[reportAny]
                return run_delete_backups(session, locale_code)
            case _:
                logger.error(f"Unknown command: {command}")
                return 1
    except AddonLocalizerError as e:
        logger.error(e.user_message)
        return 1
