"""Unit tests for envelope status buckets"""

import pytest
from envelope_engine.domain.models import EnvelopeSnapshot, StatusBucket
from envelope_engine.domain.status import calculate_envelope_status, get_status_bucket, status_label


@pytest.mark.parametrize(
    "current, expected",
    [
        (105, StatusBucket.SURPLUS),  # ratio exactly 1.05
        (104.999, StatusBucket.ON_TRACK),
        (80, StatusBucket.ON_TRACK),  # ratio exactly 0.80
        (79.999, StatusBucket.NEEDS_ATTENTION),
        (0, StatusBucket.NEEDS_ATTENTION),
        (250, StatusBucket.SURPLUS),
    ],
)
def test_ratio_boundaries(current, expected):
    """Boundary ratios belong to the higher bucket"""
    envelope = EnvelopeSnapshot(target_amount=100, current_amount=current)
    assert calculate_envelope_status(envelope) == expected


def test_tracking_takes_precedence():
    envelope = EnvelopeSnapshot(is_tracking_only=True, is_spending=True, target_amount=100, current_amount=0)
    assert calculate_envelope_status(envelope) == StatusBucket.TRACKING


def test_spending_takes_precedence_over_ratio():
    envelope = EnvelopeSnapshot(is_spending=True, target_amount=100, current_amount=500)
    assert calculate_envelope_status(envelope) == StatusBucket.SPENDING


def test_no_target():
    assert calculate_envelope_status(EnvelopeSnapshot(current_amount=50)) == StatusBucket.NO_TARGET
    assert calculate_envelope_status(EnvelopeSnapshot()) == StatusBucket.NO_TARGET


def test_storage_rows_are_accepted():
    """Missing fields are treated as falsy / 0"""
    assert calculate_envelope_status({"targetAmount": 100, "currentAmount": 105}) == StatusBucket.SURPLUS
    assert calculate_envelope_status({"target_amount": "100", "current_amount": "85"}) == StatusBucket.ON_TRACK
    assert calculate_envelope_status({"is_tracking_only": True}) == StatusBucket.TRACKING
    assert calculate_envelope_status({}) == StatusBucket.NO_TARGET


def test_both_names_share_one_implementation(sample_envelopes):
    assert get_status_bucket is calculate_envelope_status
    assert [get_status_bucket(e) for e in sample_envelopes] == [
        StatusBucket.ON_TRACK,
        StatusBucket.NEEDS_ATTENTION,
        StatusBucket.SURPLUS,
        StatusBucket.SPENDING,
        StatusBucket.TRACKING,
    ]


def test_bucket_values():
    assert StatusBucket.ON_TRACK.value == "on-track"
    assert StatusBucket.NEEDS_ATTENTION.value == "needs-attention"


def test_legacy_bucket_names_parse():
    assert StatusBucket("healthy") is StatusBucket.ON_TRACK
    assert StatusBucket("attention") is StatusBucket.NEEDS_ATTENTION
    assert StatusBucket("Surplus") is StatusBucket.SURPLUS


def test_status_labels():
    assert status_label(StatusBucket.ON_TRACK) == "On track"
    assert status_label("healthy") == "On track"
    assert status_label("attention") == "Needs attention"
    assert status_label("needs-attention") == "Needs attention"
    assert status_label(StatusBucket.NO_TARGET) == "No target"
    assert status_label("tracking") == "Tracking"
    assert status_label("all") == "All"
