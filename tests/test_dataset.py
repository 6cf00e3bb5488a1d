"""Tests for the multi-locale data set and translation edits."""

import pytest

from addon_localizer.localization.dataset import (
    LocalizationDataSet,
    TranslationEdit,
    apply_edits,
    gt_promotion_edits,
)
from addon_localizer.localization.keys import KeySet
from addon_localizer.localization.models import DuplicateEntry
from addon_localizer.utils.core.exceptions import InvalidLocaleError


class TestQueries:
    """Test cases for lookups and counts."""

    def test_translation_lookups(self, sample_dataset: LocalizationDataSet) -> None:
        """Test present, missing and unknown-locale lookups."""
        assert sample_dataset.get_translation("keep1", "deDE") == "Eins behalten"
        assert sample_dataset.get_translation("Keep2", "deDE") is None
        assert sample_dataset.get_translation("Keep1", "frFR") is None
        assert sample_dataset.get_gt_translation("Keep2", "de") == "Zwei behalten (GT)"
        assert sample_dataset.has_gt_translation("old", "de")
        assert not sample_dataset.has_gt_translation("Keep1", "es")

    def test_counts(self, sample_dataset: LocalizationDataSet) -> None:
        """Test counts for loaded and missing namespaces."""
        assert sample_dataset.get_translation_count("enUS") == 3
        assert sample_dataset.get_translation_count("frFR") == 0
        assert sample_dataset.get_gt_translation_count("de") == 2
        assert sample_dataset.has_locale("DEDE")
        assert sample_dataset.has_gt_locale("de")
        assert not sample_dataset.has_gt_locale("fr")
        assert sorted(sample_dataset.loaded_locales) == ["deDE", "enUS"]

    def test_all_keys_ignores_gt(self, sample_dataset: LocalizationDataSet) -> None:
        """Test that GT entries do not add to the key universe."""
        assert sample_dataset.all_keys == KeySet(["Keep1", "Keep2", "Remove1"])

    def test_coverage(self, sample_dataset: LocalizationDataSet) -> None:
        """Test coverage counts only non-blank values."""
        assert sample_dataset.get_coverage_percentage("enUS") == pytest.approx(100.0)
        assert sample_dataset.get_coverage_percentage("deDE") == pytest.approx(100 / 3)
        assert sample_dataset.get_coverage_percentage("frFR") == 0.0
        assert LocalizationDataSet().get_coverage_percentage("enUS") == 0.0

    def test_duplicates(self) -> None:
        """Test duplicate bookkeeping per locale."""
        dataset = LocalizationDataSet()
        dataset.add_locale(
            "deDE",
            {"Dup": "zwei"},
            {"Dup": DuplicateEntry(key="Dup", values=("eins", "zwei"))},
        )
        dataset.add_locale("frFR", {"A": "a"})

        assert dataset.has_duplicates()
        assert dataset.has_duplicates("deDE")
        assert not dataset.has_duplicates("frFR")
        assert [entry.key for entry in dataset.get_duplicates("dede")] == ["Dup"]
        assert list(dataset.get_all_duplicates()) == ["deDE"]
        assert dataset.total_duplicate_count == 1


class TestOrphans:
    """Test cases for orphan detection and removal."""

    def test_orphan_removal(self) -> None:
        """Test removing keys that no source references."""
        dataset = LocalizationDataSet()
        dataset.add_locale("enUS", {"Keep1": "a", "Remove1": "b", "Keep2": "c"})
        valid = KeySet(["Keep1", "Keep2"])

        assert dataset.get_orphaned_keys_for_locale("enUS", valid) == ["Remove1"]
        assert dataset.remove_orphaned_keys_from_locale("enUS", valid) == 1

        assert dict(dataset.get_locale_data("enUS") or {}) == {"Keep1": "a", "Keep2": "c"}
        assert dataset.remove_orphaned_keys_from_locale("enUS", valid) == 0

    def test_orphans_compare_case_insensitively(self) -> None:
        """Test that differently cased references keep a key."""
        dataset = LocalizationDataSet()
        dataset.add_locale("enUS", {"Close": "Close"})

        assert dataset.get_orphaned_keys_for_locale("enUS", ["CLOSE"]) == []

    def test_orphans_by_file(self, sample_dataset: LocalizationDataSet) -> None:
        """Test grouping orphans by locale and GT file name."""
        entries = sample_dataset.get_orphaned_entries_by_file(["Keep1", "Keep2"])

        assert entries == {
            "enUS.lua": ["Remove1"],
            "deDE.lua": ["Remove1"],
            "de-GT.lua": ["Old"],
        }

    def test_gt_orphans(self, sample_dataset: LocalizationDataSet) -> None:
        """Test orphan removal in the GT namespace."""
        valid = ["Keep1", "Keep2"]

        assert sample_dataset.get_orphaned_keys_for_gt_locale("de", valid) == ["Old"]
        assert sample_dataset.remove_orphaned_keys_from_gt_locale("de", valid) == 1
        assert sample_dataset.remove_orphaned_keys_from_gt_locale("fr", valid) == 0
        assert not sample_dataset.has_gt_translation("Old", "de")

    def test_missing_locale_has_no_orphans(self) -> None:
        """Test orphan queries on unloaded locales."""
        assert LocalizationDataSet().get_orphaned_keys_for_locale("deDE", []) == []


class TestEdits:
    """Test cases for apply_edits and GT promotion."""

    def test_apply_edits_returns_copy(self, sample_dataset: LocalizationDataSet) -> None:
        """Test that edits leave the input untouched."""
        edited = apply_edits(
            sample_dataset,
            [
                TranslationEdit(key="Keep2", locale_code="dede", value="Zwei"),
                TranslationEdit(key="New", locale_code="frFR", value="Nouveau"),
            ],
        )

        assert edited.get_translation("Keep2", "deDE") == "Zwei"
        assert edited.get_translation("New", "frFR") == "Nouveau"
        assert "New" in edited.all_keys
        assert sample_dataset.get_translation("Keep2", "deDE") is None
        assert "New" not in sample_dataset.all_keys

    def test_machine_edit_targets_base_locale(
        self, sample_dataset: LocalizationDataSet
    ) -> None:
        """Test that machine edits go to the GT namespace of the base locale."""
        edited = apply_edits(
            sample_dataset,
            [
                TranslationEdit(key="Keep1", locale_code="deDE", value="Eins", machine=True),
                TranslationEdit(key="Keep1", locale_code="zh-TW", value="一", machine=True),
            ],
        )

        assert edited.get_gt_translation("Keep1", "de") == "Eins"
        assert edited.get_gt_translation("Keep1", "zh-TW") == "一"
        assert edited.get_translation("Keep1", "deDE") == "Eins behalten"

    def test_unknown_locale(self, sample_dataset: LocalizationDataSet) -> None:
        """Test that editing an unsupported locale fails."""
        with pytest.raises(InvalidLocaleError) as exc_info:
            _ = apply_edits(
                sample_dataset,
                [TranslationEdit(key="A", locale_code="xxXX", value="a")],
            )
        assert exc_info.value.locale_code == "xxXX"

    def test_gt_promotion_fills_blank_entries(
        self, sample_dataset: LocalizationDataSet
    ) -> None:
        """Test promoting GT values where the locale has none."""
        edits = gt_promotion_edits(sample_dataset, "deDE")

        assert edits == [
            TranslationEdit(key="Keep2", locale_code="deDE", value="Zwei behalten (GT)"),
            TranslationEdit(key="Old", locale_code="deDE", value="Alt"),
        ]

    def test_gt_promotion_for_selected_keys(
        self, sample_dataset: LocalizationDataSet
    ) -> None:
        """Test promoting only the requested keys."""
        edits = gt_promotion_edits(sample_dataset, "deDE", keys=["old", "Missing"])

        assert [edit.key for edit in edits] == ["Old"]
        promoted = apply_edits(sample_dataset, edits)
        assert promoted.get_translation("Old", "deDE") == "Alt"

    def test_gt_promotion_without_gt_data(
        self, sample_dataset: LocalizationDataSet
    ) -> None:
        """Test promotion for a locale without GT translations."""
        assert gt_promotion_edits(sample_dataset, "frFR") == []
        with pytest.raises(InvalidLocaleError):
            _ = gt_promotion_edits(sample_dataset, "xxXX")
