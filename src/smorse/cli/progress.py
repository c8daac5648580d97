"""Single-line liveness display for long running searches."""

from __future__ import annotations

import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TextIO

from ..search import SearchProgress


def format_progress(progress: SearchProgress, *, rate: Optional[float] = None) -> str:
    rate_text = "n/a" if rate is None else f"{rate:.0f}"
    return (
        f"[search] examined={progress.examined} candidates/sec={rate_text} "
        f"token={hex(progress.token)} last={progress.candidate}"
    )


@dataclass
class ProgressDashboard:
    """Render heartbeats from :class:`~smorse.search.SearchDriver`.

    The line is redrawn in place at most every ``refresh_interval`` seconds; an
    interval of zero prints every heartbeat on its own line.  When ``log_path``
    is set every heartbeat is also appended to it as a JSON line.
    """

    refresh_interval: float
    log_path: Optional[Path] = None
    stream: Optional[TextIO] = None
    _clock: Callable[[], float] = time.monotonic

    def __post_init__(self) -> None:
        self._started = self._clock()
        self._drawn_at: Optional[float] = None
        self._log_file = None
        if self.stream is None:
            self.stream = sys.stderr
        if self.log_path is not None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._log_file = self.log_path.open("a", encoding="utf-8")

    @property
    def inline(self) -> bool:
        return self.refresh_interval > 0

    def close(self) -> None:
        if self.inline and self._drawn_at is not None:
            self.stream.write("\n")
            self.stream.flush()
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None

    def update(self, progress: SearchProgress) -> None:
        now = self._clock()
        elapsed = now - self._started
        rate = progress.examined / elapsed if elapsed > 0 else None
        if self._log_file is not None:
            record = {
                "examined": progress.examined,
                "token": hex(progress.token),
                "candidate": progress.candidate,
                "rate": rate,
            }
            self._log_file.write(json.dumps(record) + "\n")
            self._log_file.flush()

        if self._drawn_at is not None and now - self._drawn_at < self.refresh_interval:
            return
        self._drawn_at = now
        line = format_progress(progress, rate=rate)
        # \x1b[K clears whatever a longer previous line left behind.
        self.stream.write(f"\r{line}\x1b[K" if self.inline else line + "\n")
        self.stream.flush()


__all__ = ["ProgressDashboard", "format_progress"]
