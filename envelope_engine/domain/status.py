"""Envelope funding status - buckets an envelope by how well it is funded"""

from typing import Any, Dict, Mapping

from envelope_engine.domain.models import EnvelopeSnapshot, StatusBucket
from envelope_engine.infrastructure.observability.metrics import record_status

SURPLUS_RATIO = 1.05
ON_TRACK_RATIO = 0.8

ALL_LABEL = "All"

STATUS_LABELS: Dict[StatusBucket, str] = {
    StatusBucket.ON_TRACK: "On track",
    StatusBucket.NEEDS_ATTENTION: "Needs attention",
    StatusBucket.SURPLUS: "Surplus",
    StatusBucket.NO_TARGET: "No target",
    StatusBucket.SPENDING: "Spending",
    StatusBucket.TRACKING: "Tracking",
}


def calculate_envelope_status(envelope: EnvelopeSnapshot | Mapping[str, Any]) -> StatusBucket:
    """
    Classify an envelope into exactly one status bucket.

    Precedence (first match wins):
    - Tracking-only envelopes -> tracking
    - Spending envelopes -> spending
    - No target -> no-target
    - current/target ratio: >= 1.05 surplus, >= 0.80 on-track, else needs-attention

    Boundary ratios belong to the higher bucket.
    """
    if isinstance(envelope, Mapping):
        envelope = EnvelopeSnapshot.from_record(envelope)

    if envelope.is_tracking_only:
        bucket = StatusBucket.TRACKING
    elif envelope.is_spending:
        bucket = StatusBucket.SPENDING
    elif not envelope.target_amount:
        bucket = StatusBucket.NO_TARGET
    else:
        ratio = envelope.current_amount / envelope.target_amount
        if ratio >= SURPLUS_RATIO:
            bucket = StatusBucket.SURPLUS
        elif ratio >= ON_TRACK_RATIO:
            bucket = StatusBucket.ON_TRACK
        else:
            bucket = StatusBucket.NEEDS_ATTENTION

    record_status(bucket.value)
    return bucket


# Summary and manager screens both ask for the bucket under this name
get_status_bucket = calculate_envelope_status


def status_label(bucket: StatusBucket | str) -> str:
    """
    Display label for a bucket; accepts legacy names such as "healthy".

    Anything that is not a bucket is the "All" filter option.
    """
    try:
        return STATUS_LABELS[StatusBucket(bucket)]
    except ValueError:
        return ALL_LABEL
