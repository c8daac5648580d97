"""Shared constants and exceptions used across the smorse package."""

from __future__ import annotations

from typing import Tuple

DOT = "."
DASH = "-"
SYMBOLS: Tuple[str, ...] = (DOT, DASH)

ALPHABET = "abcdefghijklmnopqrstuvwxyz"
ALPHABET_SIZE = len(ALPHABET)
LAST_LETTER = ALPHABET_SIZE - 1
FULL_MASK = (1 << ALPHABET_SIZE) - 1

# Totals of the full code table: every squashed alphabet has exactly this many
# symbols, of which INPUT_DOTS are dots.
INPUT_SIZE = 82
INPUT_DOTS = 44


class CodeTableError(RuntimeError):
    """Raised when the Morse code table fails validation."""


class InvalidTokenError(ValueError):
    """Raised when a candidate token is rejected in strict mode."""


class InvalidCandidateError(ValueError):
    """Raised when a rendered candidate string cannot be converted to a token."""


class CheckpointFormatError(RuntimeError):
    """Raised when a checkpoint file uses an unsupported or corrupt format."""


def popcount(value: int) -> int:
    """Return the number of set bits in a non-negative integer."""

    return bin(value).count("1")


__all__ = [
    "ALPHABET",
    "ALPHABET_SIZE",
    "CheckpointFormatError",
    "CodeTableError",
    "DASH",
    "DOT",
    "FULL_MASK",
    "INPUT_DOTS",
    "INPUT_SIZE",
    "InvalidCandidateError",
    "InvalidTokenError",
    "LAST_LETTER",
    "SYMBOLS",
    "popcount",
]
