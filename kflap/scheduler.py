"""Poll dispatch bookkeeping.

Every timer tick dispatches a new poll, even while earlier polls are still
in flight.  Each dispatch gets a monotonically increasing sequence number;
when results come back, only results newer than the last applied one are
accepted.  A slow poll that finishes after a faster, later one is dropped
instead of overwriting the newer view and double-counting version changes.
"""

from __future__ import annotations

from kflap.observability.logging import get_logger

_logger = get_logger("scheduler")


class PollScheduler:
    """Hands out poll sequence numbers and filters stale deliveries.

    Not thread-safe: owned by the event loop like MonitorState.
    """

    def __init__(self, interval: int) -> None:
        if interval < 1:
            raise ValueError(f"poll interval must be at least 1 second, got {interval}")
        self.interval = interval
        self._next_seq = 0
        self._last_applied = -1
        self._in_flight: set[int] = set()
        self.stale_dropped = 0

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def last_applied(self) -> int:
        return self._last_applied

    def dispatch(self) -> int:
        """Register a new poll and return its sequence number."""
        seq = self._next_seq
        self._next_seq += 1
        self._in_flight.add(seq)
        if len(self._in_flight) > 1:
            _logger.debug("overlapping polls in flight", in_flight=len(self._in_flight), seq=seq)
        return seq

    def accept(self, seq: int) -> bool:
        """Return True if the result of poll *seq* should be applied."""
        self._in_flight.discard(seq)
        if seq <= self._last_applied:
            self.stale_dropped += 1
            _logger.info("dropping stale poll result", seq=seq, last_applied=self._last_applied)
            return False
        self._last_applied = seq
        return True
