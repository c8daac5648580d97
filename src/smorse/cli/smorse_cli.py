"""Command line front end for squashed Morse encoding, decoding and search.

``smorse encode`` squashes words, ``smorse decode`` recovers alphabet
permutations from a squashed string (interactively when no string is given),
``smorse search`` hunts for the first squashed alphabet with exactly one
decoding and ``smorse wordlist`` runs statistics and puzzles over a wordlist.

The search can run for a very long time.  The first Ctrl+C asks it to stop at
the next poll and prints a checkpoint; a second Ctrl+C falls back to the
default handler.  With ``--checkpoint`` (or ``SMORSE_CHECKPOINT``) the
checkpoint is written to disk and picked up again by the next run.
"""

from __future__ import annotations

import argparse
import itertools
import logging
import re
import signal
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TextIO, Tuple

from ..candidates import CandidateGenerator, render, token_of
from ..checkpoint import Checkpoint, default_checkpoint_path, read_checkpoint, write_checkpoint
from ..codetable import smorse
from ..common import CheckpointFormatError, InvalidCandidateError, InvalidTokenError
from ..decoder import Decoder, first_decoding, unique_decoding
from ..search import (
    DEFAULT_HEARTBEAT_INTERVAL,
    DEFAULT_POLL_INTERVAL,
    CancellationToken,
    SearchCancelled,
    SearchDriver,
    SearchFound,
)
from ..wordlist import (
    absent_sequences,
    balanced_words,
    palindrome_words,
    read_words,
    sequence_shared_by,
    symbol_counts,
    word_with_dash_run,
)
from .progress import ProgressDashboard

logger = logging.getLogger(__name__)

PROG = "smorse"
BONUS_CHOICES = (1, 2, 3, 4, 5)
DEFAULT_STATS_REFRESH = 1.0

_SQUASHED_ARG = re.compile(r"[.-]+")
_SQUASHED_PLACEHOLDER = "\0squashed:"


class CLIError(RuntimeError):
    """Raised for user errors that should end the command with status 1."""


def _parse_token(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid token {value!r}") from exc


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _protect_squashed(argv: List[str]) -> Tuple[List[str], Dict[str, str]]:
    """Hide dash-leading squashed strings from argparse's option matching.

    ``-.-..`` or ``---...`` would otherwise be taken for unknown options.  Each
    one is swapped for a placeholder that :func:`_restore_squashed` maps back
    once parsing is done.  ``-`` and ``--`` keep their usual meaning.
    """

    protected: Dict[str, str] = {}
    rewritten: List[str] = []
    for arg in argv:
        if arg.startswith("-") and arg not in ("-", "--") and _SQUASHED_ARG.fullmatch(arg):
            placeholder = f"{_SQUASHED_PLACEHOLDER}{len(protected)}"
            protected[placeholder] = arg
            arg = placeholder
        rewritten.append(arg)
    return rewritten, protected


def _restore_squashed(args: argparse.Namespace, protected: Dict[str, str]) -> None:
    for name, value in vars(args).items():
        if isinstance(value, str) and value in protected:
            setattr(args, name, protected[value])
        elif isinstance(value, list):
            setattr(args, name, [protected.get(item, item) for item in value])


def _print_decodings(
    squashed: str,
    *,
    mode: str = "first",
    limit: Optional[int] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """Print decodings of ``squashed`` and return how many were printed."""

    out = stream if stream is not None else sys.stdout
    squashed = squashed.strip()
    if mode == "unique":
        decoding = unique_decoding(squashed)
        out.write((decoding if decoding is not None else "no unique decoding") + "\n")
        return 0 if decoding is None else 1
    if mode == "all":
        printed = 0
        for decoding in itertools.islice(Decoder(squashed), limit):
            out.write(decoding + "\n")
            printed += 1
        out.write(f"{printed} decoding{'s' if printed != 1 else ''}\n")
        return printed
    decoding = first_decoding(squashed)
    out.write((decoding if decoding is not None else "no decoding") + "\n")
    return 0 if decoding is None else 1


def _interactive_decode(mode: str, limit: Optional[int]) -> None:
    from prompt_toolkit import PromptSession

    session = PromptSession()
    print("Enter squashed Morse strings (Ctrl+D to exit).")
    while True:
        try:
            query = session.prompt("smorse> ")
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            return
        if not query.strip():
            continue
        _print_decodings(query, mode=mode, limit=limit)


def _install_interrupt_handler(cancel: CancellationToken):
    """Route the first SIGINT to ``cancel``; later ones use the default handler."""

    def handler(signum, frame) -> None:
        signal.signal(signal.SIGINT, signal.default_int_handler)
        cancel.cancel()

    return signal.signal(signal.SIGINT, handler)


def _resolve_start(
    args: argparse.Namespace, checkpoint_path: Optional[Path]
) -> Tuple[Optional[int], int]:
    """Return the start token and the candidates examined by earlier runs."""

    if args.resume_from is not None:
        try:
            return token_of(args.resume_from.strip()), 0
        except InvalidCandidateError as exc:
            raise CLIError(str(exc)) from exc
    if args.resume is not None:
        return args.resume, 0
    if checkpoint_path is not None and checkpoint_path.exists():
        checkpoint = read_checkpoint(checkpoint_path)
        print(f"Resuming from checkpoint {checkpoint_path} ({checkpoint.examined} examined)")
        return checkpoint.token, checkpoint.examined
    return None, 0


def _run_search(args: argparse.Namespace) -> int:
    checkpoint_path = args.checkpoint if args.checkpoint is not None else default_checkpoint_path()
    logger.debug("Checkpoint file: %s", checkpoint_path)
    start, examined_before = _resolve_start(args, checkpoint_path)
    try:
        generator = CandidateGenerator.start_at(start, strict=args.strict)
    except InvalidTokenError as exc:
        raise CLIError(str(exc)) from exc

    cancel = CancellationToken()
    driver = SearchDriver(
        generator,
        cancel=cancel,
        probe=unique_decoding,
        poll_interval=args.poll_interval,
        heartbeat_interval=args.heartbeat_interval,
    )
    dashboard = ProgressDashboard(
        refresh_interval=args.stats_refresh,
        log_path=args.progress_log,
    )
    driver.on_heartbeat = dashboard.update

    print(f"Searching from {render(generator.token)} (token {generator.token})")
    previous_handler = _install_interrupt_handler(cancel)
    try:
        outcome = driver.run()
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        dashboard.close()

    if isinstance(outcome, SearchFound):
        print(f"Unique decoding found after {outcome.examined} candidates")
        print(f"{outcome.candidate} -> {outcome.decoding}")
        print(f"token {outcome.token}")
        return 0
    if isinstance(outcome, SearchCancelled):
        print(f"Search interrupted after {outcome.examined} candidates")
        print(f"Resume with --resume {outcome.checkpoint}")
        if checkpoint_path is not None:
            total = examined_before + outcome.examined
            written = write_checkpoint(
                checkpoint_path,
                Checkpoint(token=outcome.checkpoint, examined=total),
            )
            print(f"Checkpoint written to {written} ({total} examined in total)")
        return 0
    print(f"No candidate has a unique decoding ({outcome.examined} examined)")
    return 0


def _run_wordlist(args: argparse.Namespace) -> int:
    words: List[str] = list(read_words(args.path))
    bonuses = sorted(set(args.bonus or []))
    if not bonuses:
        print("Total counts:")
        for symbol, count in symbol_counts(words).items():
            print(f" {symbol}: {count}")
        return 0

    for bonus in bonuses:
        if bonus == 1:
            sequence = sequence_shared_by(words, 13)
            if sequence is not None:
                print(f"Sequence encoding 13 words: {sequence}")
        elif bonus == 2:
            found = word_with_dash_run(words, 15)
            if found is not None:
                print(f"{found[0]} encodes as {found[1]} which has 15 dashes in a row")
        elif bonus == 3:
            for word, sequence in balanced_words(words, 21):
                each = sequence.count("-")
                print(f"{word} encodes as {sequence} which has {each} each dots and dashes")
        elif bonus == 4:
            for word, sequence in palindrome_words(words, 13):
                print(f"{word} encodes as {sequence} which is a palindrome")
        elif bonus == 5:
            print("13-char sequences which appear in no words:")
            for sequence in absent_sequences(words, 13):
                print(f" {sequence}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Convert to and from squashed Morse code and search for uniquely decodable alphabets",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable informational logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser("encode", help="Squash lowercase words into Morse")
    encode.add_argument("texts", nargs="+", help="Words to encode")

    decode = commands.add_parser("decode", help="Decode a squashed alphabet")
    decode.add_argument(
        "squashed",
        nargs="?",
        help="Squashed Morse string, which may begin with '-' ('decode -- STRING' also works); "
        "prompts interactively when omitted",
    )
    mode_group = decode.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--all",
        dest="mode",
        action="store_const",
        const="all",
        help="Print every decoding",
    )
    mode_group.add_argument(
        "--unique",
        dest="mode",
        action="store_const",
        const="unique",
        help="Print the decoding only when it is unique",
    )
    decode.set_defaults(mode="first")
    decode.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help="Stop after this many decodings with --all",
    )

    search = commands.add_parser(
        "search",
        help="Find the first squashed alphabet with exactly one decoding",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    resume_group = search.add_mutually_exclusive_group()
    resume_group.add_argument(
        "--resume",
        type=_parse_token,
        default=None,
        help="Token to resume from (decimal or 0x-prefixed hex)",
    )
    resume_group.add_argument(
        "--resume-from",
        type=str,
        default=None,
        help="Candidate string to resume from (may begin with '-', or use --resume-from=STRING)",
    )
    search.add_argument(
        "--checkpoint",
        type=Path,
        default=None,
        help="Checkpoint file (.json, .msgpack) read on start and written on interrupt; "
        "defaults to $SMORSE_CHECKPOINT",
    )
    search.add_argument(
        "--strict",
        action="store_true",
        help="Reject invalid resume tokens instead of starting from the beginning",
    )
    search.add_argument(
        "--poll-interval",
        type=_positive_int,
        default=DEFAULT_POLL_INTERVAL,
        help="Candidates between checks for an interrupt",
    )
    search.add_argument(
        "--heartbeat-interval",
        type=_positive_int,
        default=DEFAULT_HEARTBEAT_INTERVAL,
        help="Candidates between progress reports",
    )
    search.add_argument(
        "--stats-refresh",
        type=float,
        default=DEFAULT_STATS_REFRESH,
        help="Minimum seconds between progress line updates",
    )
    search.add_argument(
        "--progress-log",
        type=Path,
        default=None,
        help="Append progress reports to the given JSONL file",
    )

    wordlist = commands.add_parser("wordlist", help="Statistics and puzzles over a wordlist")
    wordlist.add_argument("path", type=Path, help="Wordlist with one word per line")
    wordlist.add_argument(
        "--bonus",
        type=int,
        action="append",
        choices=BONUS_CHOICES,
        help="Run the numbered puzzle (can be repeated)",
    )
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_parser()
    arguments, protected = _protect_squashed(list(argv) if argv is not None else sys.argv[1:])
    args = parser.parse_args(arguments)
    _restore_squashed(args, protected)
    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    try:
        if args.command == "encode":
            for text in args.texts:
                print(smorse(text))
            return 0
        if args.command == "decode":
            if args.squashed is None:
                _interactive_decode(args.mode, args.limit)
                return 0
            _print_decodings(args.squashed, mode=args.mode, limit=args.limit)
            return 0
        if args.command == "search":
            return _run_search(args)
        return _run_wordlist(args)
    except (CLIError, CheckpointFormatError, OSError) as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
