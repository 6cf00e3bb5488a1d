"""Tests for case-insensitive key collections."""

from addon_localizer.localization.keys import KeyMap, KeySet, sort_keys


class TestKeyMap:
    """Test cases for KeyMap."""

    def test_lookup_ignores_case(self) -> None:
        """Test that differently cased keys address the same entry."""
        mapping: KeyMap[str] = KeyMap({"Close": "Schließen"})

        assert mapping["close"] == "Schließen"
        assert "CLOSE" in mapping
        assert mapping.get("cLoSe") == "Schließen"
        assert 42 not in mapping

    def test_first_spelling_is_kept(self) -> None:
        """Test that overwriting keeps the original key spelling."""
        mapping: KeyMap[int] = KeyMap()
        mapping["Close"] = 1
        mapping["CLOSE"] = 2

        assert len(mapping) == 1
        assert list(mapping) == ["Close"]
        assert mapping["close"] == 2
        assert mapping.original_key("close") == "Close"
        assert mapping.original_key("Open") is None

    def test_delete_and_copy(self) -> None:
        """Test deletion and independent copies."""
        mapping: KeyMap[str] = KeyMap([("A", "1"), ("B", "2")])
        clone = mapping.copy()
        del mapping["a"]

        assert "A" not in mapping
        assert clone["A"] == "1"
        assert dict(clone) == {"A": "1", "B": "2"}

    def test_insertion_order_is_kept(self) -> None:
        """Test that iteration follows insertion order."""
        mapping: KeyMap[int] = KeyMap({"b": 1, "a": 2, "C": 3})
        assert list(mapping) == ["b", "a", "C"]


class TestKeySet:
    """Test cases for KeySet."""

    def test_membership_ignores_case(self) -> None:
        """Test case-insensitive membership and first spelling."""
        keys = KeySet(["Keep1", "KEEP1", "Keep2"])

        assert len(keys) == 2
        assert "keep1" in keys
        assert sorted(keys) == ["Keep1", "Keep2"]

    def test_set_operations(self) -> None:
        """Test update, discard and comparison."""
        keys = KeySet(["A"])
        keys.update(["b", "C"])
        keys.discard("c")
        keys.discard("missing")

        assert keys == KeySet(["a", "B"])
        assert keys.copy() is not keys

    def test_sort_keys(self) -> None:
        """Test case-insensitive sorting with a stable tie-breaker."""
        assert sort_keys(["b", "B", "a", "C"]) == ["a", "B", "b", "C"]
