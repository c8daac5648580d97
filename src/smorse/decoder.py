"""Backtracking decoder for squashed Morse alphabets.

A squashed alphabet is the concatenation of all 26 codewords in some order.
Because the Morse table is not a prefix code, one squashed string may decode to
several permutations.  :class:`Decoder` enumerates them lazily in lexicographic
order of their letter indices.

The search keeps its state as an explicit stack of chosen letter indices (one
per depth) together with the bitmask of unused letters and the input offset
reached at each depth.  After a success the stack is rolled forward in place,
so enumeration can be paused after any result and resumed later, either on the
same instance or from the cursor of the last result via :meth:`Decoder.resume`.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .codetable import CODEWORDS
from .common import (
    ALPHABET,
    ALPHABET_SIZE,
    DOT,
    FULL_MASK,
    INPUT_DOTS,
    INPUT_SIZE,
    LAST_LETTER,
    popcount,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeState:
    """Snapshot of a partial assignment."""

    prefix: Tuple[int, ...]
    remaining: int
    suffix: str

    def __post_init__(self) -> None:
        if len(set(self.prefix)) != len(self.prefix):
            raise ValueError(f"Letter repeated in prefix {self.prefix!r}")
        if len(self.prefix) + popcount(self.remaining) != ALPHABET_SIZE:
            raise ValueError("Prefix length and remaining letters are inconsistent")

    @property
    def letters(self) -> str:
        return "".join(ALPHABET[index] for index in self.prefix)


def _match_table(squashed: str) -> Tuple[Tuple[int, ...], ...]:
    # For each offset, the letters whose codeword starts there, ascending.
    return tuple(
        tuple(
            index
            for index, code in enumerate(CODEWORDS)
            if squashed.startswith(code, offset)
        )
        for offset in range(len(squashed))
    )


def _plausible(squashed: str) -> bool:
    return len(squashed) == INPUT_SIZE and squashed.count(DOT) == INPUT_DOTS


class Decoder:
    """Lazy iterator over every permutation that encodes to ``squashed``."""

    def __init__(self, squashed: str) -> None:
        self.squashed = squashed
        self._matches = _match_table(squashed)
        self._path: List[int] = []
        self._offsets: List[int] = [0]
        self._remaining = FULL_MASK
        self._cursor = 0
        self._last: Tuple[int, ...] = ()
        self._pending_roll = False
        self._exhausted = not _plausible(squashed)
        if self._exhausted:
            logger.debug("Rejected %r: symbol totals cannot form an alphabet", squashed)

    @classmethod
    def resume(cls, squashed: str, cursor: Sequence[int]) -> "Decoder":
        """Rebuild a decoder that continues strictly after ``cursor``.

        ``cursor`` is the per-level letter sequence of a previously yielded
        result (see :attr:`cursor`).  An empty cursor starts from the beginning.
        """

        decoder = cls(squashed)
        if not cursor or decoder._exhausted:
            return decoder
        for letter in cursor:
            offset = decoder._offsets[-1]
            if (
                offset >= len(squashed)
                or letter not in decoder._matches[offset]
                or not decoder._remaining & (1 << letter)
            ):
                raise ValueError(f"Cursor {tuple(cursor)!r} is not a path through {squashed!r}")
            decoder._descend(letter, offset)
        decoder._last = tuple(cursor)
        decoder._pending_roll = True
        return decoder

    @property
    def cursor(self) -> Tuple[int, ...]:
        """Letter indices of the most recent result, one per level."""

        return self._last

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def state(self) -> DecodeState:
        return DecodeState(
            prefix=tuple(self._path),
            remaining=self._remaining,
            suffix=self.squashed[self._offsets[-1]:],
        )

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._exhausted:
            raise StopIteration
        if self._pending_roll:
            self._pending_roll = False
            if not self._roll():
                raise StopIteration
        if not self._search():
            raise StopIteration
        self._last = tuple(self._path)
        self._pending_roll = True
        return "".join(ALPHABET[index] for index in self._path)

    def _search(self) -> bool:
        end = len(self.squashed)
        while True:
            offset = self._offsets[-1]
            if offset == end and not self._remaining:
                return True
            letter = self._next_match(offset) if offset < end and self._remaining else None
            if letter is not None:
                self._descend(letter, offset)
            elif not self._roll():
                return False

    def _next_match(self, offset: int) -> Optional[int]:
        for letter in self._matches[offset]:
            if letter >= self._cursor and self._remaining & (1 << letter):
                return letter
        return None

    def _descend(self, letter: int, offset: int) -> None:
        self._path.append(letter)
        self._remaining &= ~(1 << letter)
        self._offsets.append(offset + len(CODEWORDS[letter]))
        self._cursor = 0

    def _roll(self) -> bool:
        # Deepest level first: a level whose letter was the last index hands
        # the roll to the level above it.
        while self._path:
            letter = self._path.pop()
            self._offsets.pop()
            self._remaining |= 1 << letter
            if letter < LAST_LETTER:
                self._cursor = letter + 1
                return True
        self._exhausted = True
        return False


def first_decoding(squashed: str) -> Optional[str]:
    """Return the lexicographically first decoding, or ``None``."""

    return next(Decoder(squashed), None)


def decode_all(squashed: str) -> List[str]:
    return list(Decoder(squashed))


def unique_decoding(squashed: str) -> Optional[str]:
    """Return the decoding of ``squashed`` if it has exactly one.

    At most two results are drawn from the decoder.
    """

    found = list(itertools.islice(Decoder(squashed), 2))
    if len(found) == 1:
        return found[0]
    return None


__all__ = [
    "DecodeState",
    "Decoder",
    "decode_all",
    "first_decoding",
    "unique_decoding",
]
