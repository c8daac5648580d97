"""Tests for the resumable squashed alphabet decoder."""

from __future__ import annotations

import itertools
import random

import pytest

from smorse.codetable import CODEWORDS, encode_permutation
from smorse.common import ALPHABET, FULL_MASK
from smorse.decoder import (
    DecodeState,
    Decoder,
    decode_all,
    first_decoding,
    unique_decoding,
)
from tests.fixtures import (
    AMBIGUOUS,
    AMBIGUOUS_COUNT,
    UNIQUE,
    UNIQUE_DECODING,
    WIRNBF,
    WIRNBF_COUNT,
    WIRNBF_SQUASHED,
)


def _reference_count(squashed: str) -> int:
    """Plain recursive count, independent of :class:`Decoder`."""

    def count(offset: int, unused: frozenset) -> int:
        if offset == len(squashed):
            return 1 if not unused else 0
        total = 0
        for letter in unused:
            if squashed.startswith(CODEWORDS[letter], offset):
                total += count(offset + len(CODEWORDS[letter]), unused - {letter})
        return total

    return count(0, frozenset(range(26)))


def test_ambiguous_fixture_has_all_decodings() -> None:
    decodings = decode_all(AMBIGUOUS)

    assert len(decodings) == AMBIGUOUS_COUNT
    assert len(set(decodings)) == AMBIGUOUS_COUNT
    assert decodings == sorted(decodings)
    for decoding in decodings:
        assert encode_permutation(decoding) == AMBIGUOUS


def test_decoding_count_matches_reference() -> None:
    assert _reference_count(AMBIGUOUS) == AMBIGUOUS_COUNT
    assert len(decode_all(AMBIGUOUS)) == _reference_count(AMBIGUOUS)


def test_known_permutation_is_among_its_decodings() -> None:
    assert encode_permutation(WIRNBF) == WIRNBF_SQUASHED

    decodings = decode_all(WIRNBF_SQUASHED)

    assert WIRNBF in decodings
    assert len(decodings) == WIRNBF_COUNT


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_encoded_permutation_decodes_back(seed: int) -> None:
    letters = list(ALPHABET)
    random.Random(seed).shuffle(letters)
    permutation = "".join(letters)

    assert permutation in Decoder(encode_permutation(permutation))


def test_first_decoding_is_lexicographically_first() -> None:
    assert first_decoding(AMBIGUOUS) == min(decode_all(AMBIGUOUS))
    assert first_decoding(UNIQUE) == UNIQUE_DECODING


@pytest.mark.parametrize(
    "squashed, expected",
    [
        (UNIQUE, UNIQUE_DECODING),
        (AMBIGUOUS, None),
        (WIRNBF_SQUASHED, None),
        ("-" * 38 + "." * 44, None),
        ("", None),
    ],
)
def test_unique_decoding_probe(squashed: str, expected) -> None:
    assert unique_decoding(squashed) == expected


def test_unique_decoding_draws_at_most_two(monkeypatch: pytest.MonkeyPatch) -> None:
    drawn = []

    class EndlessDecoder:
        def __init__(self, squashed: str) -> None:
            pass

        def __iter__(self):
            for index in itertools.count():
                drawn.append(index)
                yield ALPHABET

    import smorse.decoder as decoder_module

    monkeypatch.setattr(decoder_module, "Decoder", EndlessDecoder)

    assert decoder_module.unique_decoding(AMBIGUOUS) is None
    assert drawn == [0, 1]


def test_resumed_enumeration_does_not_repeat() -> None:
    decoder = Decoder(AMBIGUOUS)
    seen = []
    for _ in range(5):
        seen.append(next(decoder))
    seen.extend(decoder)

    assert len(seen) == AMBIGUOUS_COUNT
    assert len(set(seen)) == AMBIGUOUS_COUNT
    assert decoder.exhausted
    assert next(decoder, None) is None


def test_resume_from_cursor_continues_after_it() -> None:
    everything = decode_all(AMBIGUOUS)
    decoder = Decoder(AMBIGUOUS)
    for _ in range(7):
        next(decoder)
    cursor = decoder.cursor

    assert "".join(ALPHABET[index] for index in cursor) == everything[6]
    assert list(Decoder.resume(AMBIGUOUS, cursor)) == everything[7:]
    assert list(Decoder.resume(AMBIGUOUS, ())) == everything


def test_resume_rejects_invalid_cursor() -> None:
    with pytest.raises(ValueError):
        Decoder.resume(AMBIGUOUS, (0, 0))
    with pytest.raises(ValueError):
        # "t" does not match the leading dot.
        Decoder.resume(AMBIGUOUS, (19,))


def test_state_tracks_prefix_and_remaining() -> None:
    decoder = Decoder(UNIQUE)
    initial = decoder.state

    assert initial.prefix == ()
    assert initial.remaining == FULL_MASK
    assert initial.suffix == UNIQUE

    assert next(decoder) == UNIQUE_DECODING
    state = decoder.state
    assert state.letters == UNIQUE_DECODING
    assert state.remaining == 0
    assert state.suffix == ""


def test_decode_state_rejects_inconsistent_snapshots() -> None:
    with pytest.raises(ValueError):
        DecodeState(prefix=(0, 0), remaining=FULL_MASK & ~1, suffix="")
    with pytest.raises(ValueError):
        DecodeState(prefix=(0,), remaining=FULL_MASK, suffix="")


def test_foreign_symbols_never_match() -> None:
    corrupted = AMBIGUOUS[:40] + "x" + AMBIGUOUS[41:]

    assert decode_all(corrupted) == []


def test_inputs_with_wrong_totals_have_no_decodings() -> None:
    assert decode_all("") == []
    assert decode_all(AMBIGUOUS[:-1]) == []
    assert decode_all(AMBIGUOUS + ".") == []
    assert Decoder(".-").exhausted
