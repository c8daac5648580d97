"""Persist search checkpoints between runs.

Checkpoints are stored as JSON (``.json``) or msgpack (``.msgpack``/``.mpk``).
Tokens exceed the 64-bit integers msgpack can carry, so they are written as
hexadecimal strings in both formats.  The rendered candidate is stored
alongside the token and must agree with it on load.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, Mapping, Optional

import msgpack

from .candidates import is_valid_token, render, token_of
from .common import CheckpointFormatError, InvalidCandidateError

logger = logging.getLogger(__name__)

CHECKPOINT_ENV = "SMORSE_CHECKPOINT"
CHECKPOINT_VERSION = 1
JSON_SUFFIXES = {".json"}
MSGPACK_SUFFIXES = {".msgpack", ".mpk"}


@dataclass(frozen=True)
class Checkpoint:
    token: int
    examined: int = 0

    @property
    def candidate(self) -> str:
        return render(self.token)


def default_checkpoint_path() -> Optional[Path]:
    env_path = os.environ.get(CHECKPOINT_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return None


def _encode(checkpoint: Checkpoint) -> Dict[str, object]:
    return {
        "version": CHECKPOINT_VERSION,
        "token": hex(checkpoint.token),
        "candidate": checkpoint.candidate,
        "examined": int(checkpoint.examined),
        "written_at": datetime.now(UTC).isoformat(),
    }


def _decode(blob: object, path: Path) -> Checkpoint:
    if not isinstance(blob, Mapping):
        raise CheckpointFormatError(f"Checkpoint {path} does not contain a mapping")
    if blob.get("version") != CHECKPOINT_VERSION:
        raise CheckpointFormatError(
            f"Checkpoint {path} has unsupported version {blob.get('version')!r}"
        )
    raw_token = blob.get("token")
    try:
        token = int(str(raw_token), 16)
    except ValueError as exc:
        raise CheckpointFormatError(f"Checkpoint {path} has malformed token {raw_token!r}") from exc
    candidate = blob.get("candidate")
    if candidate is not None:
        try:
            candidate_token = token_of(str(candidate))
        except InvalidCandidateError as exc:
            raise CheckpointFormatError(f"Checkpoint {path}: {exc}") from exc
        if candidate_token != token:
            raise CheckpointFormatError(
                f"Checkpoint {path} candidate does not match its token"
            )
    if not is_valid_token(token):
        logger.warning("Checkpoint %s holds out-of-range token %d", path, token)
    examined = blob.get("examined", 0)
    if not isinstance(examined, int):
        raise CheckpointFormatError(f"Checkpoint {path} has malformed count {examined!r}")
    return Checkpoint(token=token, examined=examined)


def write_checkpoint(path: Path, checkpoint: Checkpoint) -> Path:
    """Write ``checkpoint`` to ``path``, picking the format from the suffix."""

    path = Path(path).expanduser()
    suffix = path.suffix.lower()
    payload = _encode(checkpoint)
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix in MSGPACK_SUFFIXES:
        with path.open("wb") as fh:
            msgpack.pack(payload, fh, use_bin_type=True)
    elif suffix in JSON_SUFFIXES:
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, sort_keys=True)
            fh.write("\n")
    else:
        raise CheckpointFormatError(f"Unsupported checkpoint format: {path}")
    logger.debug("Wrote checkpoint %d to %s", checkpoint.token, path)
    return path


def read_checkpoint(path: Path) -> Checkpoint:
    path = Path(path).expanduser()
    suffix = path.suffix.lower()
    if suffix in MSGPACK_SUFFIXES:
        with path.open("rb") as fh:
            try:
                blob = msgpack.unpack(fh, raw=False)
            except (ValueError, msgpack.exceptions.UnpackException) as exc:
                raise CheckpointFormatError(f"Checkpoint {path} is not valid msgpack") from exc
    elif suffix in JSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as fh:
            try:
                blob = json.load(fh)
            except json.JSONDecodeError as exc:
                raise CheckpointFormatError(f"Checkpoint {path} is not valid JSON") from exc
    else:
        raise CheckpointFormatError(f"Unsupported checkpoint format: {path}")
    return _decode(blob, path)


__all__ = [
    "CHECKPOINT_ENV",
    "Checkpoint",
    "default_checkpoint_path",
    "read_checkpoint",
    "write_checkpoint",
]
