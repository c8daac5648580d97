"""Ascending enumeration of every squashed alphabet candidate.

A candidate is an 82-symbol string with exactly 44 dots.  Each candidate is
identified by a token: the 82-bit integer whose bit ``i`` is set when position
``81 - i`` holds a dot.  Successive candidates are produced by the classic
"next bit permutation" step, which yields the next larger integer with the same
number of set bits in constant time::

    t = v | (v - 1)
    w = (t + 1) | (((~t & -~t) - 1) >> (trailing_zeros(v) + 1))

Tokens double as checkpoints: :meth:`CandidateGenerator.start_at` resumes an
enumeration from any token, and :func:`token_of` recovers the token of a
candidate string obtained elsewhere.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from .common import (
    DASH,
    DOT,
    INPUT_DOTS,
    INPUT_SIZE,
    InvalidCandidateError,
    InvalidTokenError,
    popcount,
)

logger = logging.getLogger(__name__)

# 44 set bits in the low end of the field.
LOW = (1 << INPUT_DOTS) - 1
# The same bits shifted to the high end; nothing past this fits in 82 bits.
HIGH = LOW << (INPUT_SIZE - INPUT_DOTS)

_DOT_BYTE = ord(DOT)
_DASH_BYTE = ord(DASH)


def trailing_zeros(value: int) -> int:
    return (value & -value).bit_length() - 1


def next_permutation(value: int) -> int:
    """Return the next larger integer with the same popcount as ``value``."""

    t = value | (value - 1)
    return (t + 1) | (((~t & -~t) - 1) >> (trailing_zeros(value) + 1))


def is_valid_token(token: int) -> bool:
    return LOW <= token <= HIGH and popcount(token) == INPUT_DOTS


def render(token: int) -> str:
    """Render ``token`` as an 82-symbol candidate string."""

    buffer = bytearray(INPUT_SIZE)
    for bit in range(INPUT_SIZE):
        buffer[INPUT_SIZE - 1 - bit] = _DOT_BYTE if token >> bit & 1 else _DASH_BYTE
    return buffer.decode("ascii")


def token_of(candidate: str) -> int:
    """Recover the token that renders as ``candidate``."""

    if len(candidate) != INPUT_SIZE:
        raise InvalidCandidateError(
            f"Candidate must have {INPUT_SIZE} symbols, got {len(candidate)}"
        )
    token = 0
    for bit in range(INPUT_SIZE):
        symbol = candidate[INPUT_SIZE - 1 - bit]
        if symbol == DOT:
            token |= 1 << bit
        elif symbol != DASH:
            raise InvalidCandidateError(
                f"Unexpected symbol {symbol!r} at position {INPUT_SIZE - 1 - bit}"
            )
    return token


class CandidateGenerator:
    """Iterator over candidate strings in ascending token order."""

    def __init__(self) -> None:
        self._token = LOW

    @classmethod
    def start(cls) -> "CandidateGenerator":
        return cls()

    @classmethod
    def start_at(cls, token: Optional[int], *, strict: bool = False) -> "CandidateGenerator":
        """Begin at ``token``; invalid tokens are raised to ``LOW``.

        With ``strict`` an invalid token raises :class:`InvalidTokenError`
        instead.  ``None`` starts from ``LOW``.
        """

        generator = cls()
        if token is None:
            return generator
        if not is_valid_token(token):
            if strict:
                raise InvalidTokenError(f"Token {token} is not a valid candidate token")
            logger.warning("Token %d is not a valid candidate token; starting from %d", token, LOW)
            return generator
        generator._token = token
        return generator

    @property
    def token(self) -> int:
        """Token of the next candidate :meth:`advance` will return."""

        return self._token

    @property
    def exhausted(self) -> bool:
        return self._token > HIGH

    def current(self) -> str:
        return render(self._token)

    def advance(self) -> Optional[str]:
        if self._token > HIGH:
            return None
        candidate = render(self._token)
        self._token = next_permutation(self._token)
        return candidate

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        candidate = self.advance()
        if candidate is None:
            raise StopIteration
        return candidate


__all__ = [
    "CandidateGenerator",
    "HIGH",
    "LOW",
    "is_valid_token",
    "next_permutation",
    "render",
    "token_of",
    "trailing_zeros",
]
