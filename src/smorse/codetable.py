"""Letter to Morse codeword lookup and squashed encoding."""

from __future__ import annotations

from typing import Tuple

from .common import (
    ALPHABET,
    ALPHABET_SIZE,
    CodeTableError,
    DOT,
    INPUT_DOTS,
    INPUT_SIZE,
    SYMBOLS,
)

CODEWORDS: Tuple[str, ...] = tuple(
    ".- -... -.-. -.. . ..-. --. .... .. .--- -.- .-.. -- "
    "-. --- .--. --.- .-. ... - ..- ...- .-- -..- -.-- --..".split(" ")
)


def _validate_table(table: Tuple[str, ...]) -> None:
    if len(table) != ALPHABET_SIZE:
        raise CodeTableError(f"Code table has {len(table)} entries, expected {ALPHABET_SIZE}")
    if len(set(table)) != len(table):
        raise CodeTableError("Code table contains duplicate codewords")
    for index, code in enumerate(table):
        if not 1 <= len(code) <= 4 or any(symbol not in SYMBOLS for symbol in code):
            raise CodeTableError(f"Malformed codeword {code!r} for {ALPHABET[index]!r}")
    total = "".join(table)
    if len(total) != INPUT_SIZE or total.count(DOT) != INPUT_DOTS:
        raise CodeTableError("Code table totals do not match the squashed alphabet size")


_validate_table(CODEWORDS)


def codeword(letter_index: int) -> str:
    """Return the codeword for ``letter_index`` (``0`` is ``a``)."""

    if isinstance(letter_index, bool) or not isinstance(letter_index, int):
        raise ValueError(f"Letter index must be an int, got {letter_index!r}")
    if not 0 <= letter_index < ALPHABET_SIZE:
        raise ValueError(f"Letter index {letter_index} outside [0, {ALPHABET_SIZE})")
    return CODEWORDS[letter_index]


def letter_index(letter: str) -> int:
    index = ALPHABET.find(letter)
    if len(letter) != 1 or index < 0:
        raise ValueError(f"Not a lowercase letter: {letter!r}")
    return index


def smorse(text: str) -> str:
    """Squash ``text`` into Morse; characters outside ``a``-``z`` are dropped."""

    return "".join(CODEWORDS[ord(ch) - ord("a")] for ch in text if "a" <= ch <= "z")


def encode_permutation(letters: str) -> str:
    """Encode a full permutation of the alphabet."""

    if len(letters) != ALPHABET_SIZE or set(letters) != set(ALPHABET):
        raise ValueError(f"Not a permutation of the alphabet: {letters!r}")
    return smorse(letters)


__all__ = ["CODEWORDS", "codeword", "encode_permutation", "letter_index", "smorse"]
