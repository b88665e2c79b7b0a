"""Prometheus metrics for the status check."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

status_transitions_total = Counter(
    "rolloutcheck_status_transitions_total",
    "Resource outcome transitions, by the code entered.",
    ["code"],
)

rollout_probes_total = Counter(
    "rolloutcheck_rollout_probes_total",
    "kubectl rollout status probes, by result (ok, error).",
    ["result"],
)

rollout_probe_duration_seconds = Histogram(
    "rolloutcheck_rollout_probe_duration_seconds",
    "Wall time of a single kubectl rollout status probe.",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)
