"""Wordlist statistics and puzzles over squashed Morse encodings."""

from __future__ import annotations

import itertools
from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .codetable import smorse
from .common import DASH, DOT, SYMBOLS


def read_words(path: Path) -> Iterator[str]:
    """Yield the non-empty lines of a wordlist file."""

    with Path(path).expanduser().open("r", encoding="utf-8") as fh:
        for line in fh:
            word = line.strip()
            if word:
                yield word


def symbol_counts(words: Iterable[str]) -> Counter:
    counts: Counter = Counter()
    for word in words:
        counts.update(smorse(word))
    return counts


def sequence_shared_by(words: Iterable[str], count: int = 13) -> Optional[str]:
    """Return the first encoding produced by exactly ``count`` words."""

    counts = Counter(smorse(word) for word in words)
    for sequence, seen in counts.items():
        if seen == count:
            return sequence
    return None


def word_with_dash_run(words: Iterable[str], run: int = 15) -> Optional[Tuple[str, str]]:
    needle = DASH * run
    for word in words:
        sequence = smorse(word)
        if needle in sequence:
            return word, sequence
    return None


def balanced_words(words: Iterable[str], length: int = 21) -> List[Tuple[str, str]]:
    """Words of ``length`` letters whose encoding has as many dots as dashes."""

    found = []
    for word in words:
        if len(word) != length:
            continue
        sequence = smorse(word)
        dashes = sequence.count(DASH)
        if dashes and dashes == sequence.count(DOT):
            found.append((word, sequence))
    return found


def palindrome_words(words: Iterable[str], length: int = 13) -> List[Tuple[str, str]]:
    found = []
    for word in words:
        if len(word) != length:
            continue
        sequence = smorse(word)
        if sequence == sequence[::-1]:
            found.append((word, sequence))
    return found


def absent_sequences(words: Iterable[str], length: int = 13) -> List[str]:
    """Every ``length``-symbol sequence that occurs in no word's encoding."""

    present: Set[str] = set()
    for word in words:
        sequence = smorse(word)
        for start in range(len(sequence) - length + 1):
            present.add(sequence[start:start + length])
    return [
        candidate
        for candidate in ("".join(symbols) for symbols in itertools.product(SYMBOLS, repeat=length))
        if candidate not in present
    ]


__all__ = [
    "absent_sequences",
    "balanced_words",
    "palindrome_words",
    "read_words",
    "sequence_shared_by",
    "symbol_counts",
    "word_with_dash_run",
]
