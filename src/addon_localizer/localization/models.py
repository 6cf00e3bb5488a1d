"""
Data models for extracted glue strings.

A ``ParseResult`` is produced per scanned file and folded into a
directory-wide result by key. Flags are OR-ed and counts summed on merge;
location lists are capped, and the first locations seen survive the cap.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from .format_specifiers import FormatParameter, count_parameters
from .keys import KeyMap, KeySet

# Upper bound on stored locations per key and per location kind
LOCATION_CAP = 100


@dataclass(frozen=True, slots=True)
class GlueLocation:
    """Where a glue string was seen. Line 0 means the file mentions the key."""

    file_path: str
    line_number: int

    @property
    def is_file_level(self) -> bool:
        return self.line_number == 0


@dataclass(slots=True)
class GlueInfo:
    """Everything known about one glue string across the scanned sources."""

    key: str
    has_concatenation: bool = False
    used_in_template_call: bool = False
    occurrence_count: int = 0
    locations: list[GlueLocation] = field(default_factory=list)
    template_locations: list[GlueLocation] = field(default_factory=list)
    format_parameters: list[FormatParameter] = field(default_factory=list)
    location_cap: int = LOCATION_CAP

    @property
    def parameter_count(self) -> int:
        """Number of format arguments the value expects."""
        return count_parameters(self.format_parameters)

    def add_location(self, location: GlueLocation) -> bool:
        """Record a location, returning False when capped or already known."""
        return _append_capped(self.locations, location, self.location_cap)

    def add_template_location(self, location: GlueLocation) -> bool:
        """Record a template-call location, returning False when capped or known."""
        return _append_capped(self.template_locations, location, self.location_cap)

    def merge(self, other: GlueInfo) -> None:
        """Fold another record for the same key into this one."""
        self.has_concatenation = self.has_concatenation or other.has_concatenation
        self.used_in_template_call = (
            self.used_in_template_call or other.used_in_template_call
        )
        self.occurrence_count += other.occurrence_count
        for location in other.locations:
            _ = self.add_location(location)
        for location in other.template_locations:
            _ = self.add_template_location(location)
        if not self.format_parameters and other.format_parameters:
            self.format_parameters = list(other.format_parameters)

    def copy(self) -> GlueInfo:
        return GlueInfo(
            key=self.key,
            has_concatenation=self.has_concatenation,
            used_in_template_call=self.used_in_template_call,
            occurrence_count=self.occurrence_count,
            locations=list(self.locations),
            template_locations=list(self.template_locations),
            format_parameters=list(self.format_parameters),
            location_cap=self.location_cap,
        )


def _append_capped(
    locations: list[GlueLocation], location: GlueLocation, cap: int
) -> bool:
    if len(locations) >= cap or location in locations:
        return False
    locations.append(location)
    return True


class ParseResult:
    """
    Glue strings found in one or more source files, keyed case-insensitively.

    The ``non_concatenated``, ``concatenated`` and ``with_template_call``
    views are computed on access and never stored.
    """

    def __init__(self, location_cap: int = LOCATION_CAP) -> None:
        self.location_cap: int = location_cap
        self.glue_strings: KeyMap[GlueInfo] = KeyMap()
        # Keys only referenced from compound assignments in locale files
        self.referenced_keys: KeySet = KeySet()

    def __len__(self) -> int:
        return len(self.glue_strings)

    def __contains__(self, key: object) -> bool:
        return key in self.glue_strings

    def __iter__(self) -> Iterator[GlueInfo]:
        return iter(self.glue_strings.values())

    def get(self, key: str) -> GlueInfo | None:
        return self.glue_strings.get(key)

    def get_or_create(self, key: str) -> GlueInfo:
        info = self.glue_strings.get(key)
        if info is None:
            info = GlueInfo(key=key, location_cap=self.location_cap)
            self.glue_strings[key] = info
        return info

    @property
    def non_concatenated(self) -> list[GlueInfo]:
        return [info for info in self if not info.has_concatenation]

    @property
    def concatenated(self) -> list[GlueInfo]:
        return [info for info in self if info.has_concatenation]

    @property
    def with_template_call(self) -> list[GlueInfo]:
        return [info for info in self if info.used_in_template_call]

    @property
    def total_occurrences(self) -> int:
        return sum(info.occurrence_count for info in self)

    def merge(self, other: ParseResult) -> ParseResult:
        """Fold ``other`` into this result in place and return self."""
        for other_info in other:
            existing = self.glue_strings.get(other_info.key)
            if existing is None:
                info = other_info.copy()
                info.location_cap = self.location_cap
                del info.locations[self.location_cap :]
                del info.template_locations[self.location_cap :]
                self.glue_strings[other_info.key] = info
            else:
                existing.merge(other_info)
        self.referenced_keys.update(other.referenced_keys)
        return self

    def keys(self) -> KeySet:
        """All keys the scanned sources use, for orphan detection."""
        keys = KeySet(self.glue_strings)
        keys.update(self.referenced_keys)
        return keys

    def attach_format_parameters(
        self, parameters_by_key: Mapping[str, list[FormatParameter]]
    ) -> int:
        """
        Copy format parameters (usually from the base locale) onto known keys.

        Returns:
            Number of keys that received parameters
        """
        attached = 0
        for key, parameters in parameters_by_key.items():
            info = self.glue_strings.get(key)
            if info is not None:
                info.format_parameters = list(parameters)
                attached += 1
        return attached

    def add_reference_keys(self, keys: Iterable[str]) -> None:
        """Register keys used by compound assignments so they are never orphaned."""
        self.referenced_keys.update(keys)


def merge_results(*results: ParseResult) -> ParseResult:
    """Merge results into a new ``ParseResult`` without touching the inputs."""
    location_cap = results[0].location_cap if results else LOCATION_CAP
    merged = ParseResult(location_cap=location_cap)
    for result in results:
        _ = merged.merge(result)
    return merged


@dataclass(frozen=True, slots=True)
class DuplicateEntry:
    """A key assigned more than once in a single locale file."""

    key: str
    values: tuple[str, ...]

    @property
    def final_value(self) -> str:
        """The value Lua ends up with: the last assignment wins."""
        return self.values[-1]

    @property
    def occurrence_count(self) -> int:
        return len(self.values)


@dataclass(frozen=True, slots=True)
class LocaleFileContents:
    """Translations and duplicate assignments read from one locale file."""

    translations: KeyMap[str]
    duplicates: KeyMap[DuplicateEntry]
