"""In-process latency timers for the read paths."""
import time
from contextlib import contextmanager
from collections import defaultdict, deque

# Most recent samples kept per timer
TIMER_WINDOW = 1000

_timers = defaultdict(lambda: deque(maxlen=TIMER_WINDOW))


@contextmanager
def record_latency(name: str):
    start = time.perf_counter()
    try:
        yield
    finally:
        _timers[name].append((time.perf_counter() - start) * 1000.0)


def _percentile(values, p: float) -> float:
    vals = sorted(values)
    idx = int(round(p * (len(vals) - 1)))
    return vals[idx]


def get_metrics_snapshot() -> dict:
    return {k: {
        "count": len(v),
        "avg_ms": (sum(v) / len(v)) if v else 0.0,
        "p95_ms": _percentile(v, 0.95) if v else 0.0,
    } for k, v in _timers.items()}


def reset_metrics() -> None:
    _timers.clear()
