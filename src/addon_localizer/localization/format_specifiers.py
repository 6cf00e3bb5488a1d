"""
Parsing of printf-style format specifiers in localized strings.

Translations passed to ``string.format`` must keep the same specifiers as
the source text, so each value is reduced to an ordered list of typed
parameters that can be compared across locales.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class FormatParameterType(Enum):
    """Kind of value a format specifier consumes."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    CHARACTER = "character"
    UNSIGNED = "unsigned"
    HEXADECIMAL = "hexadecimal"
    OCTAL = "octal"
    EXPONENTIAL = "exponential"
    GENERAL = "general"
    PERCENT = "percent"


_TYPE_BY_CONVERSION: dict[str, FormatParameterType] = {
    "s": FormatParameterType.STRING,
    "a": FormatParameterType.STRING,
    "A": FormatParameterType.STRING,
    "d": FormatParameterType.INTEGER,
    "i": FormatParameterType.INTEGER,
    "f": FormatParameterType.FLOAT,
    "c": FormatParameterType.CHARACTER,
    "u": FormatParameterType.UNSIGNED,
    "x": FormatParameterType.HEXADECIMAL,
    "X": FormatParameterType.HEXADECIMAL,
    "o": FormatParameterType.OCTAL,
    "e": FormatParameterType.EXPONENTIAL,
    "E": FormatParameterType.EXPONENTIAL,
    "g": FormatParameterType.GENERAL,
    "G": FormatParameterType.GENERAL,
    "%": FormatParameterType.PERCENT,
}

# Space is deliberately not a flag: "Haste% in Voidform" must not match
FORMAT_SPECIFIER_PATTERN = re.compile(
    r"%(?:(?P<index>\d+)\$)?(?P<flags>[+\-0#]*)(?P<width>\d*)"
    r"(?:\.(?P<precision>\d+))?(?P<conversion>[sdioxXeEfgGcuaA%])"
)


@dataclass(frozen=True, slots=True)
class FormatParameter:
    """A single specifier found in a format string."""

    position: int
    type: FormatParameterType
    raw_specifier: str
    width: int | None = None
    precision: int | None = None
    has_positional_index: bool = False

    @property
    def is_percent(self) -> bool:
        return self.type is FormatParameterType.PERCENT


def parse_format_specifiers(value: str) -> list[FormatParameter]:
    """
    Parse the format specifiers of an unescaped string value.

    Sequential specifiers are numbered from 1. Positional specifiers
    (``%2$s``) keep their own index and do not advance the sequence.
    A literal ``%%`` is recorded with position 0.

    Args:
        value: String value as it appears at runtime

    Returns:
        Specifiers in the order they appear
    """
    parameters: list[FormatParameter] = []
    if "%" not in value:
        return parameters

    next_position = 1
    for match in FORMAT_SPECIFIER_PATTERN.finditer(value):
        parameter_type = _TYPE_BY_CONVERSION[match.group("conversion")]
        index = match.group("index")
        width = match.group("width")
        precision = match.group("precision")

        if parameter_type is FormatParameterType.PERCENT:
            position = 0
        elif index:
            position = int(index)
        else:
            position = next_position
            next_position += 1

        parameters.append(
            FormatParameter(
                position=position,
                type=parameter_type,
                raw_specifier=match.group(0),
                width=int(width) if width else None,
                precision=int(precision) if precision is not None else None,
                has_positional_index=bool(index),
            )
        )

    return parameters


def count_parameters(parameters: list[FormatParameter]) -> int:
    """Number of arguments consumed, ignoring literal percent signs."""
    return sum(1 for parameter in parameters if not parameter.is_percent)
