"""Named operation timers.

A ``TimingAccessor`` is created by whoever owns the element service and is
flushed (logged) when that service closes. Timers may be shared between
threads: start times are kept per thread and totals are updated under a lock.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from types import TracebackType

from .metrics import OPERATION_DURATION

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimerStats:
    name: str
    count: int
    total_seconds: float

    @property
    def average_ms(self) -> float:
        return (self.total_seconds / self.count) * 1000 if self.count else 0.0


class Timer:
    """Accumulates duration and invocation count for one operation name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._local = threading.local()
        self._count = 0
        self._total = 0.0

    def _starts(self) -> list[float]:
        starts = getattr(self._local, "starts", None)
        if starts is None:
            starts = self._local.starts = []
        return starts

    def start(self) -> Timer:
        self._starts().append(time.perf_counter())
        return self

    def stop(self) -> float:
        """Stop the most recent start on this thread; returns elapsed seconds."""
        starts = self._starts()
        if not starts:
            raise RuntimeError(f"timer '{self.name}' stopped without being started")
        elapsed = time.perf_counter() - starts.pop()
        with self._lock:
            self._count += 1
            self._total += elapsed
        OPERATION_DURATION.labels(operation=self.name).observe(elapsed)
        return elapsed

    def __enter__(self) -> Timer:
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def stats(self) -> TimerStats:
        with self._lock:
            return TimerStats(self.name, self._count, self._total)


class TimingAccessor:
    """Registry of named timers."""

    def __init__(self) -> None:
        self._timers: dict[str, Timer] = {}
        self._lock = threading.Lock()

    def timer(self, name: str) -> Timer:
        with self._lock:
            timer = self._timers.get(name)
            if timer is None:
                timer = self._timers[name] = Timer(name)
            return timer

    def collect(self) -> list[TimerStats]:
        with self._lock:
            timers = list(self._timers.values())
        return sorted((t.stats() for t in timers), key=lambda s: s.name)

    def report(self) -> str:
        lines = [f"{'operation':<20} {'count':>8} {'total_ms':>12} {'avg_ms':>10}"]
        for s in self.collect():
            lines.append(
                f"{s.name:<20} {s.count:>8} {s.total_seconds * 1000:>12.2f} {s.average_ms:>10.2f}"
            )
        return "\n".join(lines)

    def print_report(self) -> None:
        timers = {
            s.name: {"count": s.count, "total_ms": round(s.total_seconds * 1000, 3)}
            for s in self.collect()
        }
        logger.info("timing.report", extra={"timers": timers})
        logger.debug("timing.report.table\n%s", self.report())
