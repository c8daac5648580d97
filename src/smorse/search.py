"""Search for the first squashed alphabet with exactly one decoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .candidates import CandidateGenerator
from .decoder import unique_decoding

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1024
DEFAULT_HEARTBEAT_INTERVAL = 1 << 16


class CancellationToken:
    """One-way flag set by an external actor and polled by the search.

    ``cancel`` may be called from a signal handler or another thread; reading
    :attr:`cancelled` is a single attribute load.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(frozen=True)
class SearchFound:
    candidate: str
    decoding: str
    token: int
    examined: int


@dataclass(frozen=True)
class SearchCancelled:
    """The search stopped on request; resume from ``checkpoint``."""

    checkpoint: int
    examined: int


@dataclass(frozen=True)
class SearchExhausted:
    examined: int


@dataclass(frozen=True)
class SearchProgress:
    examined: int
    token: int
    candidate: str


SearchOutcome = Union[SearchFound, SearchCancelled, SearchExhausted]
Probe = Callable[[str], Optional[str]]


class SearchDriver:
    """Pull candidates until one decodes uniquely, the generator runs dry, or
    the cancellation token is set.

    The token is checked before the first candidate and then every
    ``poll_interval`` candidates.  The checkpoint reported on cancellation is
    the token of the next unexamined candidate, so
    ``CandidateGenerator.start_at(checkpoint)`` continues without repeating
    work.
    """

    def __init__(
        self,
        generator: CandidateGenerator,
        *,
        cancel: Optional[CancellationToken] = None,
        probe: Probe = unique_decoding,
        poll_interval: int = DEFAULT_POLL_INTERVAL,
        heartbeat_interval: int = DEFAULT_HEARTBEAT_INTERVAL,
        on_heartbeat: Optional[Callable[[SearchProgress], None]] = None,
    ) -> None:
        if poll_interval < 1:
            raise ValueError("poll_interval must be positive")
        if heartbeat_interval < 1:
            raise ValueError("heartbeat_interval must be positive")
        self.generator = generator
        self.cancel = cancel if cancel is not None else CancellationToken()
        self.probe = probe
        self.poll_interval = int(poll_interval)
        self.heartbeat_interval = int(heartbeat_interval)
        self.on_heartbeat = on_heartbeat

    def run(self) -> SearchOutcome:
        generator = self.generator
        examined = 0
        logger.debug("Search starting at token %d", generator.token)
        while True:
            if generator.exhausted:
                logger.info("Candidate space exhausted after %d candidates", examined)
                return SearchExhausted(examined=examined)
            if examined % self.poll_interval == 0 and self.cancel.cancelled:
                logger.info(
                    "Search cancelled after %d candidates; checkpoint %d",
                    examined,
                    generator.token,
                )
                return SearchCancelled(checkpoint=generator.token, examined=examined)

            token = generator.token
            candidate = generator.advance()
            if candidate is None:  # pragma: no cover - guarded by exhausted above
                return SearchExhausted(examined=examined)
            examined += 1

            decoding = self.probe(candidate)
            if decoding is not None:
                logger.info("Found %s -> %s after %d candidates", candidate, decoding, examined)
                return SearchFound(
                    candidate=candidate,
                    decoding=decoding,
                    token=token,
                    examined=examined,
                )

            if examined % self.heartbeat_interval == 0:
                self._heartbeat(SearchProgress(examined=examined, token=token, candidate=candidate))

    def _heartbeat(self, progress: SearchProgress) -> None:
        logger.info("Examined %d candidates, last %s", progress.examined, progress.candidate)
        if self.on_heartbeat is not None:
            self.on_heartbeat(progress)


def search(
    start: Optional[int] = None,
    *,
    cancel: Optional[CancellationToken] = None,
    **options,
) -> SearchOutcome:
    """Run a :class:`SearchDriver` from ``start`` (``LOW`` when omitted)."""

    return SearchDriver(CandidateGenerator.start_at(start), cancel=cancel, **options).run()


__all__ = [
    "CancellationToken",
    "DEFAULT_HEARTBEAT_INTERVAL",
    "DEFAULT_POLL_INTERVAL",
    "SearchCancelled",
    "SearchDriver",
    "SearchExhausted",
    "SearchFound",
    "SearchOutcome",
    "SearchProgress",
    "search",
]
