from .timing import Timer, TimerStats, TimingAccessor
from .tracing import configure_tracing

__all__ = ["Timer", "TimerStats", "TimingAccessor", "configure_tracing"]
