"""Prometheus-style metrics: in-memory request counters and duration count/sum, updated by middleware."""
import math
import threading
from dataclasses import dataclass, field

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

REQUESTS_TOTAL = "http_requests_total"
REQUEST_DURATION = "http_request_duration_seconds"

RequestKey = tuple[str, str, int]  # (method, endpoint, status_code)
EndpointKey = tuple[str, str]  # (method, endpoint)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of a registry; safe to format without holding the lock."""

    request_counts: dict[RequestKey, int] = field(default_factory=dict)
    request_durations: dict[EndpointKey, tuple[int, float]] = field(default_factory=dict)


class MetricsRegistry:
    """
    Accumulates per-route request counts and duration samples.

    Counters are keyed by (method, endpoint, status_code); duration count/sum by
    (method, endpoint). Labels are stored verbatim: no path normalization, no validation.
    Entries are never removed or reset for the lifetime of the registry.
    """

    def __init__(self) -> None:
        self._request_counts: dict[RequestKey, int] = {}
        # (method, endpoint) -> [sample_count, sample_sum]
        self._request_durations: dict[EndpointKey, list] = {}
        self._lock = threading.Lock()

    def record(self, method: str, endpoint: str, status_code: int, duration_seconds: float) -> None:
        """Call from middleware once per completed request."""
        key = (method, endpoint, status_code)
        duration_key = (method, endpoint)
        with self._lock:
            self._request_counts[key] = self._request_counts.get(key, 0) + 1
            stats = self._request_durations.get(duration_key)
            if stats is None:
                self._request_durations[duration_key] = [1, duration_seconds]
            else:
                stats[0] += 1
                stats[1] += duration_seconds

    def request_counts(self) -> dict[RequestKey, int]:
        with self._lock:
            return dict(self._request_counts)

    def request_durations(self) -> dict[EndpointKey, tuple[int, float]]:
        with self._lock:
            return {k: (v[0], v[1]) for k, v in self._request_durations.items()}

    def snapshot(self) -> MetricsSnapshot:
        """Copy both maps under one lock acquisition so counts and durations agree."""
        with self._lock:
            counts = dict(self._request_counts)
            durations = {k: (v[0], v[1]) for k, v in self._request_durations.items()}
        return MetricsSnapshot(request_counts=counts, request_durations=durations)

    def render(self) -> str:
        """Render current state in Prometheus text exposition format."""
        return format_prometheus(self.snapshot())


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_value(value: float) -> str:
    """Counts as integers, sums as shortest round-trip floats (Prometheus spells non-finite values +Inf/-Inf/NaN)."""
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(value)


def _labels(**labels: object) -> str:
    return ",".join(f'{name}="{escape_label_value(str(value))}"' for name, value in labels.items())


def _sort_key(key: tuple) -> tuple:
    # status codes are ints but sort as text alongside the string labels
    return tuple(str(part) for part in key)


def format_prometheus(snapshot: MetricsSnapshot) -> str:
    """Render a snapshot in Prometheus text exposition format. Data lines are sorted by label values."""
    lines = [
        f"# HELP {REQUESTS_TOTAL} Total number of HTTP requests",
        f"# TYPE {REQUESTS_TOTAL} counter",
    ]
    for (method, endpoint, status_code), count in sorted(snapshot.request_counts.items(), key=lambda kv: _sort_key(kv[0])):
        labels = _labels(method=method, endpoint=endpoint, status_code=status_code)
        lines.append(f"{REQUESTS_TOTAL}{{{labels}}} {format_value(count)}")
    lines.extend([
        f"# HELP {REQUEST_DURATION} Duration of HTTP requests in seconds",
        f"# TYPE {REQUEST_DURATION} histogram",
    ])
    # count/sum only: no bucket boundaries are tracked
    for (method, endpoint), (count, total) in sorted(snapshot.request_durations.items(), key=lambda kv: _sort_key(kv[0])):
        labels = _labels(method=method, endpoint=endpoint)
        lines.append(f"{REQUEST_DURATION}_count{{{labels}}} {format_value(count)}")
        lines.append(f"{REQUEST_DURATION}_sum{{{labels}}} {format_value(float(total))}")
    return "\n".join(lines) + "\n"
