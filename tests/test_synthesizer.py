"""Tests for locale file regeneration."""

import pytest

from addon_localizer.localization.extractor import GlueStringExtractor
from addon_localizer.localization.synthesizer import (
    NO_ASSIGNMENTS_WARNING,
    LocaleFileSynthesizer,
    find_guarded_block,
)

GUARDED = [
    "local _, TRB = ...",
    "",
    "local locale = GetLocale()",
    "",
    'if locale == "deDE" then',
    "    local L = TRB.Localization",
    "",
    "    -- Options",
    '    L["Keep1"] = "Eins"',
    '    L["Full"] = L["Keep1"] .. "!"',
    '    L["Keep2"] = "Zwei" -- checked',
    "end",
    "",
]

UNGUARDED = [
    "local _, TRB = ...",
    "local L = TRB.Localization",
    "",
    'L["Keep1"] = "Keep one"',
    "-- Section",
    'L["Remove1"] = "Remove me"',
    'L["Keep2"] = "Keep two"',
    "",
    "TRB.Ready = true",
]


@pytest.fixture
def synthesizer() -> LocaleFileSynthesizer:
    """Default synthesizer for TRB.Localization files."""
    return LocaleFileSynthesizer()


class TestNewFile:
    """Test cases for generating files from scratch."""

    def test_new_file_template(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test the exact template for a single locale."""
        lines = synthesizer.synthesize("deDE", {"B": "zwei", "A": "eins", "C": " "})

        assert lines == [
            "local _, TRB = ...",
            "",
            "local locale = GetLocale()",
            "",
            'if locale == "deDE" then',
            "    local L = TRB.Localization",
            "    ",
            '    L["A"] = "eins"',
            '    L["B"] = "zwei"',
            "end",
            "",
        ]

    def test_blank_existing_file_is_replaced(
        self, synthesizer: LocaleFileSynthesizer
    ) -> None:
        """Test that whitespace-only files get the template."""
        lines = synthesizer.synthesize("frFR", {"A": "a"}, ["", "   "])
        assert 'if locale == "frFR" then' in lines

    def test_new_file_round_trip(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that a generated file reads back to the same translations."""
        lines = synthesizer.synthesize("deDE", {"A": "eins"})
        extractor = GlueStringExtractor()

        assignments = [extractor.parse_assignment(line) for line in lines]
        values = {a.key: a.value for a in assignments if a is not None}

        assert values == {"A": "eins"}

    def test_gt_file_guard(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test several locales and an empty spacer line."""
        lines = synthesizer.new_file(["esES", "esMX"], {"A": 'say "x"'}, spacer="")

        assert lines[4] == 'if locale == "esES" or locale == "esMX" then'
        assert lines[6] == ""
        assert lines[7] == '    L["A"] = "say \\"x\\""'

    def test_custom_namespace(self) -> None:
        """Test configurable header names."""
        custom = LocaleFileSynthesizer(
            lookup_identifier="Loc", addon_namespace="NS", table_expression="NS.L"
        )
        lines = custom.synthesize("deDE", {"A": "a"})

        assert lines[0] == "local _, NS = ..."
        assert lines[5] == "    local Loc = NS.L"
        assert lines[7] == '    Loc["A"] = "a"'


class TestMergeGuarded:
    """Test cases for merging into guarded files."""

    def test_no_op_keeps_every_line(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that unchanged values reproduce the file exactly."""
        lines = synthesizer.synthesize("deDE", {"Keep1": "Eins", "Keep2": "Zwei"}, GUARDED)
        assert lines == GUARDED

    def test_change_remove_and_add(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test rewriting, clearing and appending keys."""
        lines = synthesizer.synthesize(
            "deDE",
            {"Keep1": "", "Keep2": "Zwei!", "New": "Neu", "Another": "Noch"},
            GUARDED,
        )

        assert lines == [
            "local _, TRB = ...",
            "",
            "local locale = GetLocale()",
            "",
            'if locale == "deDE" then',
            "    local L = TRB.Localization",
            "",
            "    -- Options",
            '    L["Full"] = L["Keep1"] .. "!"',
            '    L["Keep2"] = "Zwei!"',
            '    L["Another"] = "Noch"',
            '    L["New"] = "Neu"',
            "end",
            "",
        ]

    def test_keys_missing_from_map_are_kept(
        self, synthesizer: LocaleFileSynthesizer
    ) -> None:
        """Test that guarded files keep keys the map does not mention."""
        lines = synthesizer.synthesize("deDE", {"Keep2": "Zwei"}, GUARDED)
        assert '    L["Keep1"] = "Eins"' in lines

    def test_duplicates_are_collapsed(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that repeated assignments of a key are written once."""
        existing = [
            'if locale == "deDE" then',
            '    L["Dup"] = "one"',
            '    L["Dup"] = "two"',
            '    L["Dup"] = "three"',
            "end",
        ]
        lines = synthesizer.synthesize("deDE", {"Dup": "three"}, existing)

        assert lines == ['if locale == "deDE" then', '    L["Dup"] = "three"', "end"]

    def test_changed_value_keeps_indent(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that a rewritten line keeps its original indentation."""
        existing = ['if locale == "deDE" then', '\t\tL["A"] = "a"', "end"]
        lines = synthesizer.synthesize("deDE", {"A": "b"}, existing)

        assert lines[1] == '\t\tL["A"] = "b"'


class TestMergeUnguarded:
    """Test cases for merging into unguarded base files."""

    def test_orphans_are_dropped(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that keys outside the map are removed from the region."""
        lines = synthesizer.synthesize(
            "enUS", {"Keep1": "Keep one", "Keep2": "Keep two"}, UNGUARDED
        )

        assert lines == [
            "local _, TRB = ...",
            "local L = TRB.Localization",
            "",
            'L["Keep1"] = "Keep one"',
            "-- Section",
            'L["Keep2"] = "Keep two"',
            "",
            "TRB.Ready = true",
        ]

    def test_new_keys_use_first_indent(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test appended keys after the last assignment."""
        existing = ["local L = {}", '  L["B"] = "b"', "return L"]
        lines = synthesizer.synthesize("enUS", {"B": "b", "A": "a"}, existing)

        assert lines == ["local L = {}", '  L["B"] = "b"', '  L["A"] = "a"', "return L"]

    def test_file_without_assignments(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that unrecognized files are preserved with a warning."""
        existing = ["local L = {}", "return L"]
        lines = synthesizer.synthesize("enUS", {"A": "a"}, existing)

        assert lines == [NO_ASSIGNMENTS_WARNING, *existing]

    def test_computed_assignments_bound_the_region(
        self, synthesizer: LocaleFileSynthesizer
    ) -> None:
        """Test a base file whose only assignments have computed values."""
        existing = ['L["Full"] = L["A"] .. L["B"]']

        lines = synthesizer.synthesize("enUS", {"New": "n"}, existing)
        assert lines == ['L["Full"] = L["A"] .. L["B"]', 'L["New"] = "n"']

        again = synthesizer.synthesize("enUS", {"New": "n"}, lines)
        assert again == lines
        assert NO_ASSIGNMENTS_WARNING not in again

    def test_computed_assignment_is_not_appended_twice(
        self, synthesizer: LocaleFileSynthesizer
    ) -> None:
        """Test that a key with a computed value keeps its original line."""
        existing = ['L["A"] = "a"', '    L["Full"] = L["A"] .. "!"']

        lines = synthesizer.synthesize("enUS", {"A": "a", "Full": "a!"}, existing)

        assert lines == existing

    def test_unclosed_guard_falls_back(self, synthesizer: LocaleFileSynthesizer) -> None:
        """Test that a guard without end is treated as an unguarded file."""
        existing = ['if locale == "deDE" then', '    L["A"] = "a"', '    L["B"] = "b"']

        assert find_guarded_block(existing) is None
        lines = synthesizer.synthesize("deDE", {"A": "a"}, existing)
        assert lines == ['if locale == "deDE" then', '    L["A"] = "a"']


class TestFindGuardedBlock:
    """Test cases for guard detection."""

    def test_guard_and_end(self) -> None:
        """Test locating the guard and the closing end."""
        assert find_guarded_block(GUARDED) == (4, 11)

    def test_no_guard(self) -> None:
        """Test a file without a guard."""
        assert find_guarded_block(UNGUARDED) is None
