"""Tests for scanning addon directories and loading locale files."""

from collections.abc import Callable
from pathlib import Path

import pytest

from addon_localizer.localization.dataset import LocalizationDataSet
from addon_localizer.localization.extractor import GlueStringExtractor
from addon_localizer.localization.parser import LuaLocalizationParser, is_excluded_path
from addon_localizer.utils.core.exceptions import LocalizationNotFoundError


@pytest.fixture
def parser() -> LuaLocalizationParser:
    """Parser reading from the local disk."""
    return LuaLocalizationParser()


class TestExcludedPaths:
    """Test cases for subdirectory exclusion."""

    def test_segment_matching(self) -> None:
        """Test whole-segment, case-insensitive matching."""
        base = "/addon"
        assert is_excluded_path("/addon/Libs/Ace/Ace.lua", base, ["libs"])
        assert is_excluded_path("/addon/Modules/Libs/x.lua", base, ["Libs"])
        assert is_excluded_path("/addon/Libs/Ace3/x.lua", base, ["Libs/Ace3"])
        assert not is_excluded_path("/addon/LibsExtra/x.lua", base, ["Libs"])
        assert not is_excluded_path("/addon/Libs.lua", base, ["Libs"])
        assert not is_excluded_path("/addon/Libs/Other/x.lua", base, ["Libs/Ace3"])


class TestSourceScanning:
    """Test cases for parse_file and parse_directory."""

    def test_parse_directory(self, parser: LuaLocalizationParser, addon_dir: Path) -> None:
        """Test scanning with excluded library and localization folders."""
        result = parser.parse_directory(
            str(addon_dir), exclude_subdirectories=["Libs", "Localization"]
        )

        assert sorted(info.key for info in result) == [
            "Author",
            "Commented",
            "Keep1",
            "Keep2",
            "PlayerItems",
            "Spec_",
        ]
        keep1 = result.get("Keep1")
        assert keep1 is not None
        assert keep1.occurrence_count == 2
        assert {location.file_path for location in keep1.locations} == {
            str(addon_dir / "Core.lua"),
            str(addon_dir / "UI" / "Options.lua"),
        }

        author = result.get("Author")
        assert author is not None
        assert not author.has_concatenation

        spec = result.get("Spec_")
        assert spec is not None
        assert spec.has_concatenation

        player_items = result.get("PlayerItems")
        assert player_items is not None
        assert player_items.used_in_template_call

    def test_parse_directory_without_exclusions(
        self, parser: LuaLocalizationParser, addon_dir: Path
    ) -> None:
        """Test that library and locale files are scanned when not excluded."""
        result = parser.parse_directory(str(addon_dir))

        assert "LibraryOnly" in result
        assert "Remove1" in result

    def test_missing_paths(self, parser: LuaLocalizationParser, tmp_path: Path) -> None:
        """Test that missing files and directories raise a typed error."""
        with pytest.raises(LocalizationNotFoundError) as exc_info:
            _ = parser.parse_directory(str(tmp_path / "missing"))
        assert exc_info.value.path == str(tmp_path / "missing")

        with pytest.raises(FileNotFoundError):
            _ = parser.parse_file(str(tmp_path / "missing.lua"))

    def test_bom_is_ignored(
        self,
        parser: LuaLocalizationParser,
        tmp_path: Path,
        write_file: Callable[[Path, str], Path],
    ) -> None:
        """Test that a UTF-8 byte order mark does not hide the first line."""
        path = write_file(tmp_path / "bom.lua", '\ufeffL["First"] = "1"\n')

        assert parser.parse_localization_definitions(str(path)) == {"First"}


class TestLocaleFiles:
    """Test cases for reading locale files."""

    def test_duplicates_collapse_to_last_value(
        self,
        parser: LuaLocalizationParser,
        tmp_path: Path,
        write_file: Callable[[Path, str], Path],
    ) -> None:
        """Test that the last of three assignments wins."""
        path = write_file(
            tmp_path / "deDE.lua",
            'L["Dup"] = "one"\nL["Dup"] = "two"\nL["Dup"] = "three"\nL["Once"] = "x"\n',
        )

        contents = parser.parse_locale_translations(str(path))

        assert dict(contents.translations) == {"Dup": "three", "Once": "x"}
        duplicate = contents.duplicates["Dup"]
        assert duplicate.values == ("one", "two", "three")
        assert duplicate.occurrence_count == 3
        assert "Once" not in contents.duplicates

    def test_compound_assignments(
        self,
        parser: LuaLocalizationParser,
        tmp_path: Path,
        write_file: Callable[[Path, str], Path],
    ) -> None:
        """Test definitions, usages and values of compound assignments."""
        path = write_file(
            tmp_path / "enUS.lua",
            'L["Short"] = "Short"\nL["Full"] = L["Short"] .. " and more"\n',
        )

        assert parser.parse_localization_definitions(str(path)) == {"Short", "Full"}
        assert parser.parse_localization_usages(str(path)) == {"Short"}
        assert dict(parser.parse_locale_translations(str(path)).translations) == {
            "Short": "Short"
        }

    def test_format_parameters(
        self,
        parser: LuaLocalizationParser,
        localization_dir: Path,
    ) -> None:
        """Test reading format specifiers from locale values."""
        parameters = parser.parse_format_parameters(str(localization_dir / "enUS.lua"))

        assert list(parameters) == ["PlayerItems"]
        assert len(parameters["playeritems"]) == 4

    def test_parse_localization_directory(
        self, parser: LuaLocalizationParser, localization_dir: Path
    ) -> None:
        """Test loading locales while skipping GT files."""
        dataset = parser.parse_localization_directory(str(localization_dir))

        assert sorted(dataset.loaded_locales) == ["deDE", "enUS"]
        assert dataset.get_translation("Keep1", "deDE") == "Eins behalten"
        assert dataset.get_translation("Author", "deDE") is None
        assert dataset.loaded_gt_locales == []
        assert len(dataset.all_keys) == 5

    def test_unknown_file_names_are_skipped(
        self,
        parser: LuaLocalizationParser,
        localization_dir: Path,
        write_file: Callable[[Path, str], Path],
    ) -> None:
        """Test that non-locale files are ignored and codes are normalized."""
        _ = write_file(localization_dir / "Helpers.lua", 'L["X"] = "x"\n')
        _ = write_file(localization_dir / "frfr.lua", 'L["Keep1"] = "Un"\n')

        dataset = parser.parse_localization_directory(str(localization_dir))

        assert sorted(dataset.loaded_locales) == ["deDE", "enUS", "frFR"]

    def test_load_gt_files(
        self, parser: LuaLocalizationParser, localization_dir: Path
    ) -> None:
        """Test loading GT files into their own namespace."""
        dataset = LocalizationDataSet()

        loaded = parser.load_gt_files(str(localization_dir), dataset)

        assert loaded == 1
        assert dataset.loaded_gt_locales == ["de"]
        assert dataset.get_gt_translation("Author", "de") == "Autor"
        assert dataset.get_translation("Author", "deDE") is None

    def test_custom_identifier(
        self, tmp_path: Path, write_file: Callable[[Path, str], Path]
    ) -> None:
        """Test reading locale files for a differently named table."""
        parser = LuaLocalizationParser(extractor=GlueStringExtractor(lookup_identifier="Loc"))
        path = write_file(tmp_path / "enUS.lua", 'Loc["Hi"] = "Hello"\nL["No"] = "x"\n')

        assert dict(parser.parse_locale_translations(str(path)).translations) == {
            "Hi": "Hello"
        }
