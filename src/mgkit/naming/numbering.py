"""Numeric prefixes that pin sample order on the hardware.

The Multigrain lists samples alphabetically, so ``01_kick.wav`` style
prefixes are the only way to control the order of a folder. New imports
follow whatever convention the folder already uses.
"""

import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from mgkit.types import NumberingPattern, SchemeOverride, SeparatorType

# Matches "01_x", "01 x", "01 - x", "01-x", "01.x" (digits, separator)
PREFIX_PATTERN = re.compile(r"^([0-9]{1,3})(\s*[-_.]\s*|\s+)(?=\S)")

# Vote order; the first entry wins a tie
DIGIT_PREFERENCE: tuple[int, ...] = (2, 1, 3)
SEPARATOR_PREFERENCE: tuple[SeparatorType, ...] = ("_", " ", " - ", "-", ".")

T = TypeVar("T")

PATTERNS: dict[int, NumberingPattern] = {1: "1_", 2: "01_", 3: "001_"}


@dataclass(frozen=True)
class NumberingScheme:
    """Prefix convention of a folder."""

    pattern: NumberingPattern
    digits: int
    separator: SeparatorType
    next_number: int


DEFAULT_SCHEME = NumberingScheme(pattern="01_", digits=2, separator="_", next_number=1)


@dataclass(frozen=True)
class PrefixInfo:
    number: int
    digits: int
    separator: SeparatorType


def normalize_separator(raw: str) -> SeparatorType:
    """Map a matched separator onto one of the canonical forms."""
    if raw in ("_", "-", "."):
        return raw  # type: ignore[return-value]
    if raw in (" - ", " -", "- "):
        return " - "
    if raw and not raw.strip():
        return " "
    return "_"


def has_number_prefix(filename: str) -> bool:
    return PREFIX_PATTERN.match(filename) is not None


def extract_prefix_number(filename: str) -> int | None:
    """Return the numeric prefix of filename, or None."""
    match = PREFIX_PATTERN.match(filename)
    return int(match.group(1)) if match else None


def extract_prefix_info(filename: str) -> PrefixInfo | None:
    match = PREFIX_PATTERN.match(filename)
    if match is None:
        return None
    digits = match.group(1)
    return PrefixInfo(
        number=int(digits),
        digits=len(digits),
        separator=normalize_separator(match.group(2)),
    )


def _vote(counts: Counter[T], preference: Sequence[T]) -> T:
    winner, best = preference[0], 0
    for candidate in preference:
        if counts[candidate] > best:
            winner, best = candidate, counts[candidate]
    return winner


def detect_numbering_scheme(names: Iterable[str]) -> NumberingScheme:
    """Detect the prefix convention of existing file names.

    Digit width and separator are chosen independently by majority vote over
    the prefixed names; ties resolve in favour of 2 digits and "_". The next
    number is one past the highest prefix, so gaps are never refilled.

    Args:
        names: File names already in the folder.

    Returns:
        The detected scheme, or :data:`DEFAULT_SCHEME` when no name carries
        a prefix.
    """
    digit_counts: Counter[int] = Counter()
    separator_counts: Counter[SeparatorType] = Counter()
    max_number = 0

    for name in names:
        info = extract_prefix_info(name)
        if info is None:
            continue
        digit_counts[info.digits] += 1
        separator_counts[info.separator] += 1
        max_number = max(max_number, info.number)

    if not digit_counts:
        return DEFAULT_SCHEME

    digits = _vote(digit_counts, DIGIT_PREFERENCE)
    return NumberingScheme(
        pattern=PATTERNS[digits],
        digits=digits,
        separator=_vote(separator_counts, SEPARATOR_PREFERENCE),
        next_number=max_number + 1,
    )


def scheme_with_override(names: Iterable[str], override: SchemeOverride) -> NumberingScheme:
    """Force a digit width while keeping the folder's separator and next number."""
    detected = detect_numbering_scheme(names)
    return NumberingScheme(
        pattern=override,
        digits=3 if override == "001_" else 2,
        separator=detected.separator,
        next_number=detected.next_number,
    )


def apply_number_prefix(name: str, number: int, scheme: NumberingScheme) -> str:
    """Prefix name with number in the given scheme.

    Names that already carry any prefix are returned unchanged.

    >>> apply_number_prefix("kick.wav", 7, DEFAULT_SCHEME)
    '07_kick.wav'
    """
    if has_number_prefix(name):
        return name
    return f"{number:0{scheme.digits}d}{scheme.separator or '_'}{name}"


def remove_number_prefix(name: str) -> str:
    return PREFIX_PATTERN.sub("", name, count=1)


def generate_numbered_filenames(
    to_import: Sequence[str],
    existing: Iterable[str],
    scheme_override: SchemeOverride | None = None,
) -> dict[str, str]:
    """Plan prefixed names for a batch, in import order.

    Names that already have a prefix map to themselves and do not consume a
    number.

    Returns:
        Mapping of original name to final name, in the order of to_import.
    """
    if scheme_override:
        scheme = scheme_with_override(existing, scheme_override)
    else:
        scheme = detect_numbering_scheme(existing)

    result: dict[str, str] = {}
    number = scheme.next_number
    for name in to_import:
        if has_number_prefix(name):
            result[name] = name
        else:
            result[name] = apply_number_prefix(name, number, scheme)
            number += 1
    return result
