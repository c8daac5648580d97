from __future__ import annotations

import random

import pytest

from smorse import codetable
from smorse.common import ALPHABET, CodeTableError, INPUT_DOTS, INPUT_SIZE


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a", ".-"),
        ("b", "-..."),
        ("sos", "...---..."),
        ("daily", "-...-...-..-.--"),
        ("programmer", ".--..-.-----..-..-----..-."),
        ("bits", "-.....-..."),
        ("three", "-.....-..."),
    ],
)
def test_smorse_encodes_words(text: str, expected: str) -> None:
    assert codetable.smorse(text) == expected


def test_smorse_drops_characters_outside_alphabet() -> None:
    assert codetable.smorse("S-o s!") == codetable.smorse("os")
    assert codetable.smorse("") == ""


def test_codeword_rejects_out_of_range_indices() -> None:
    assert codetable.codeword(0) == ".-"
    assert codetable.codeword(25) == "--.."
    for bad in (-1, 26, True, 1.0, "a"):
        with pytest.raises(ValueError):
            codetable.codeword(bad)  # type: ignore[arg-type]


def test_full_alphabet_totals() -> None:
    squashed = codetable.smorse(ALPHABET)

    assert len(squashed) == INPUT_SIZE
    assert squashed.count(".") == INPUT_DOTS


def test_encode_permutation_requires_full_alphabet() -> None:
    letters = list(ALPHABET)
    random.Random(3).shuffle(letters)
    permutation = "".join(letters)

    assert codetable.encode_permutation(permutation) == codetable.smorse(permutation)
    with pytest.raises(ValueError):
        codetable.encode_permutation("abc")
    with pytest.raises(ValueError):
        codetable.encode_permutation("a" * 26)


def test_letter_index_roundtrip() -> None:
    assert [codetable.letter_index(ch) for ch in ALPHABET] == list(range(26))
    with pytest.raises(ValueError):
        codetable.letter_index("A")
    with pytest.raises(ValueError):
        codetable.letter_index("")


def test_validate_table_rejects_malformed_tables() -> None:
    with pytest.raises(CodeTableError):
        codetable._validate_table(codetable.CODEWORDS[:-1])
    with pytest.raises(CodeTableError):
        codetable._validate_table(codetable.CODEWORDS[:-1] + (".",))
    with pytest.raises(CodeTableError):
        codetable._validate_table(codetable.CODEWORDS[:-1] + ("--x.",))
