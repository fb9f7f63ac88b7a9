"""Prometheus metrics for envelope classification and frequency fallbacks"""

from prometheus_client import Counter

# Classification metrics
envelope_status_counter = Counter(
    "envelope_status_total",
    "Envelopes classified by funding status bucket",
    ["bucket"],  # on-track | needs-attention | surplus | no-target | spending | tracking
)

# Input quality metrics
frequency_fallback_counter = Counter(
    "frequency_fallback_total",
    "Unknown frequency values resolved to the monthly-equivalent default",
    ["axis"],  # pay | bill
)

custom_weeks_fallback_counter = Counter(
    "custom_weeks_fallback_total",
    "custom_weeks contributions computed without a week count",
)


def record_status(bucket: str) -> None:
    """Record one envelope classification"""
    envelope_status_counter.labels(bucket=bucket).inc()


def record_frequency_fallback(axis: str) -> None:
    """Record an unknown pay or bill frequency"""
    frequency_fallback_counter.labels(axis=axis).inc()


def record_custom_weeks_fallback() -> None:
    custom_weeks_fallback_counter.inc()
