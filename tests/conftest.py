"""
Global test fixtures for Addon Localizer tests.

This module provides a small on-disk addon (sources, libraries and a
localization directory) plus helpers for writing Lua files, so parser,
writer and command-line tests work against the same realistic layout.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from addon_localizer.localization.dataset import LocalizationDataSet
from addon_localizer.localization.keys import KeyMap

CORE_LUA = """local _, TRB = ...
local L = TRB.Localization

-- L["Commented"] still counts as a reference
local function Setup(frame)
    frame.title:SetText(L["Keep1"])
    frame.author:SetText(L["Author"] .. ":")
    frame.status:SetText(string.format(L["PlayerItems"], name, count, percent))
    frame.spec:SetText(L["Spec_" .. specId])
end
"""

OPTIONS_LUA = """local _, TRB = ...
local L = TRB.Localization

local options = {
    name = L["Keep1"],
    desc = L["Keep2"],
}
"""

LIB_LUA = """local L = {}
L["LibraryOnly"] = "ignored"
"""

ENUS_LUA = """local _, TRB = ...
local L = TRB.Localization

L["Author"] = "Author"
L["Keep1"] = "Keep one"
L["Keep2"] = "Keep two"
L["PlayerItems"] = "Player %s has %d items (%.1f%% full)"
L["Remove1"] = "Remove me"
"""

DEDE_LUA = """local _, TRB = ...

local locale = GetLocale()

if locale == "deDE" then
    local L = TRB.Localization

    L["Keep1"] = "Eins behalten"
    L["Keep2"] = "Zwei behalten"
    L["Remove1"] = "Entfernen"
end
"""

DE_GT_LUA = """local _, TRB = ...

local locale = GetLocale()

if locale == "deDE" then
    local L = TRB.Localization

    L["Author"] = "Autor"
    L["Stale"] = "Veraltet"
end
"""


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Return a helper that writes UTF-8 text, creating parent directories."""

    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(content, encoding="utf-8", newline="")
        return path

    return _write


@pytest.fixture
def addon_dir(tmp_path: Path, write_file: Callable[[Path, str], Path]) -> Path:
    """
    Create a sample addon on disk.

    Layout::

        MyAddon/Core.lua
        MyAddon/UI/Options.lua
        MyAddon/Libs/Lib.lua
        MyAddon/Localization/enUS.lua
        MyAddon/Localization/deDE.lua
        MyAddon/Localization/de-GT.lua
    """
    root = tmp_path / "MyAddon"
    _ = write_file(root / "Core.lua", CORE_LUA)
    _ = write_file(root / "UI" / "Options.lua", OPTIONS_LUA)
    _ = write_file(root / "Libs" / "Lib.lua", LIB_LUA)
    _ = write_file(root / "Localization" / "enUS.lua", ENUS_LUA)
    _ = write_file(root / "Localization" / "deDE.lua", DEDE_LUA)
    _ = write_file(root / "Localization" / "de-GT.lua", DE_GT_LUA)
    return root


@pytest.fixture
def localization_dir(addon_dir: Path) -> Path:
    """The sample addon's localization directory."""
    return addon_dir / "Localization"


@pytest.fixture
def sample_dataset() -> LocalizationDataSet:
    """A data set with an English source, a German locale and German GT entries."""
    dataset = LocalizationDataSet()
    dataset.add_locale(
        "enUS",
        KeyMap({"Keep1": "Keep one", "Keep2": "Keep two", "Remove1": "Remove me"}),
    )
    dataset.add_locale("deDE", KeyMap({"Keep1": "Eins behalten", "Remove1": ""}))
    dataset.add_gt_locale("de", KeyMap({"Keep2": "Zwei behalten (GT)", "Old": "Alt"}))
    return dataset
