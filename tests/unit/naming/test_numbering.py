"""Unit tests for mgkit.naming.numbering prefix detection and application."""

from collections import Counter

import pytest

from mgkit.naming.numbering import (
    DEFAULT_SCHEME,
    DIGIT_PREFERENCE,
    SEPARATOR_PREFERENCE,
    NumberingScheme,
    _vote,
    apply_number_prefix,
    detect_numbering_scheme,
    extract_prefix_number,
    generate_numbered_filenames,
    has_number_prefix,
    normalize_separator,
    remove_number_prefix,
    scheme_with_override,
)


class TestPrefixMatching:
    """Tests for recognizing numeric prefixes."""

    @pytest.mark.parametrize(
        "name",
        ["01_kick.wav", "1 kick.wav", "001 - kick.wav", "12-kick.wav", "3.kick.wav", "07 _ x.wav"],
    )
    def test_prefixed(self, name: str) -> None:
        assert has_number_prefix(name)

    @pytest.mark.parametrize(
        "name",
        ["kick.wav", "0001_kick.wav", "808kick.wav", "01_", "01 ", "kick_01.wav", ""],
    )
    def test_not_prefixed(self, name: str) -> None:
        assert not has_number_prefix(name)

    def test_extract_number(self) -> None:
        assert extract_prefix_number("007_bond.wav") == 7
        assert extract_prefix_number("12 - x.wav") == 12
        assert extract_prefix_number("kick.wav") is None

    def test_remove_prefix(self) -> None:
        assert remove_number_prefix("01_kick.wav") == "kick.wav"
        assert remove_number_prefix("02 - snare.wav") == "snare.wav"
        assert remove_number_prefix("hat.wav") == "hat.wav"


class TestNormalizeSeparator:
    """Tests for mapping raw separators to canonical ones."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("_", "_"),
            ("-", "-"),
            (".", "."),
            (" - ", " - "),
            (" -", " - "),
            ("- ", " - "),
            (" ", " "),
            ("   ", " "),
            ("\t", " "),
            (" _ ", "_"),
            ("  -  ", "_"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_separator(raw) == expected


class TestDetectNumberingScheme:
    """Tests for majority-vote scheme detection."""

    def test_default_when_nothing_prefixed(self) -> None:
        scheme = detect_numbering_scheme(["kick.wav", "snare.wav"])

        assert scheme == DEFAULT_SCHEME
        assert scheme == NumberingScheme(pattern="01_", digits=2, separator="_", next_number=1)

    def test_default_for_empty_folder(self) -> None:
        assert detect_numbering_scheme([]) == DEFAULT_SCHEME

    def test_vote_returns_preferred_candidate_on_tie(self) -> None:
        assert _vote(Counter({1: 2, 3: 2}), DIGIT_PREFERENCE) == 1
        assert _vote(Counter({"-": 1, ".": 1}), SEPARATOR_PREFERENCE) == "-"
        assert _vote(Counter(), DIGIT_PREFERENCE) == 2

    def test_majority_vote(self) -> None:
        scheme = detect_numbering_scheme(["01_a.wav", "02_b.wav", "03_c.wav", "001_d.wav"])

        assert scheme.digits == 2
        assert scheme.pattern == "01_"
        assert scheme.separator == "_"
        assert scheme.next_number == 4

    def test_three_digits_with_spaced_dash(self) -> None:
        scheme = detect_numbering_scheme(["001 - a.wav", "002 - b.wav", "x.wav"])

        assert scheme == NumberingScheme(pattern="001_", digits=3, separator=" - ", next_number=3)

    def test_gaps_are_not_filled(self) -> None:
        assert detect_numbering_scheme(["01_a.wav", "09_b.wav"]).next_number == 10

    def test_digit_tie_prefers_two(self) -> None:
        scheme = detect_numbering_scheme(["1_a.wav", "01_b.wav", "001_c.wav"])

        assert scheme.digits == 2
        assert scheme.next_number == 2

    def test_digit_tie_between_one_and_three_prefers_one(self) -> None:
        assert detect_numbering_scheme(["1_a.wav", "001_c.wav"]).digits == 1

    def test_separator_tie_prefers_underscore(self) -> None:
        scheme = detect_numbering_scheme(["01-a.wav", "02_b.wav", "03.c.wav"])

        assert scheme.separator == "_"

    def test_separator_tie_without_underscore(self) -> None:
        assert detect_numbering_scheme(["01-a.wav", "02 b.wav"]).separator == " "

    def test_separator_majority(self) -> None:
        scheme = detect_numbering_scheme(["01-a.wav", "02-b.wav", "03_c.wav"])

        assert scheme.separator == "-"


class TestApplyNumberPrefix:
    """Tests for prefixing a single name."""

    def test_default_scheme(self) -> None:
        assert apply_number_prefix("kick.wav", 1, DEFAULT_SCHEME) == "01_kick.wav"

    def test_three_digits_spaced(self) -> None:
        scheme = NumberingScheme(pattern="001_", digits=3, separator=" - ", next_number=1)

        assert apply_number_prefix("kick.wav", 42, scheme) == "042 - kick.wav"

    def test_number_wider_than_scheme(self) -> None:
        assert apply_number_prefix("kick.wav", 123, DEFAULT_SCHEME) == "123_kick.wav"

    def test_existing_prefix_is_kept(self) -> None:
        assert apply_number_prefix("5 kick.wav", 1, DEFAULT_SCHEME) == "5 kick.wav"


class TestSchemeOverride:
    """Tests for forcing a digit width."""

    def test_keeps_separator_and_next_number(self) -> None:
        scheme = scheme_with_override(["01 - a.wav", "02 - b.wav"], "001_")

        assert scheme == NumberingScheme(pattern="001_", digits=3, separator=" - ", next_number=3)

    def test_two_digit_override_on_empty_folder(self) -> None:
        assert scheme_with_override([], "01_") == DEFAULT_SCHEME


class TestGenerateNumberedFilenames:
    """Tests for planning a batch."""

    def test_continues_existing_sequence(self) -> None:
        planned = generate_numbered_filenames(
            ["kick.wav", "snare.wav"], ["01_bass.wav", "02_pad.wav"]
        )

        assert planned == {"kick.wav": "03_kick.wav", "snare.wav": "04_snare.wav"}
        assert list(planned) == ["kick.wav", "snare.wav"]

    def test_prefixed_names_do_not_consume_numbers(self) -> None:
        planned = generate_numbered_filenames(["a.wav", "10_b.wav", "c.wav"], [])

        assert planned == {"a.wav": "01_a.wav", "10_b.wav": "10_b.wav", "c.wav": "02_c.wav"}

    def test_override(self) -> None:
        planned = generate_numbered_filenames(["a.wav"], ["5-x.wav"], scheme_override="001_")

        assert planned == {"a.wav": "006-a.wav"}
