"""Unit tests for frequency parsing, snapshots and money helpers"""

import pytest
from datetime import date
from envelope_engine.domain.exceptions import InvalidFrequencyError
from envelope_engine.domain.models import BillFrequency, EnvelopeSnapshot, PayFrequency
from envelope_engine.utils.money import round2, to_amount


def test_frequency_axes_are_distinct():
    """Pay and bill frequencies share strings but not members"""
    assert PayFrequency.MONTHLY == "monthly"
    assert BillFrequency.MONTHLY == "monthly"
    assert PayFrequency.parse(BillFrequency.QUARTERLY) is None
    assert PayFrequency.parse(BillFrequency.MONTHLY) is None
    assert BillFrequency.parse(PayFrequency.WEEKLY) is None
    assert BillFrequency.parse("twice_monthly") is None
    assert PayFrequency.parse("twice_monthly") is PayFrequency.TWICE_MONTHLY


def test_parse_strict_raises():
    with pytest.raises(InvalidFrequencyError):
        PayFrequency.parse("quarterly", strict=True)
    with pytest.raises(InvalidFrequencyError):
        PayFrequency.parse(BillFrequency.MONTHLY, strict=True)
    with pytest.raises(InvalidFrequencyError):
        BillFrequency.parse(None, strict=True)


def test_parse_normalizes_stored_values():
    assert BillFrequency.parse("  Custom_Weeks ") is BillFrequency.CUSTOM_WEEKS
    assert BillFrequency.parse(BillFrequency.NONE) is BillFrequency.NONE


def test_snapshot_from_record():
    snapshot = EnvelopeSnapshot.from_record(
        {
            "current_amount": "42.50",
            "targetAmount": 100,
            "isSpending": 1,
            "pay_cycle_amount": None,
        }
    )

    assert snapshot.current_amount == 42.5
    assert snapshot.target_amount == 100
    assert snapshot.is_spending is True
    assert snapshot.is_tracking_only is False
    assert snapshot.pay_cycle_amount == 0
    assert snapshot.envelope_type == "expense"
    assert snapshot.priority is None


def test_round2_half_up():
    assert round2(0.125) == 0.13
    assert round2(2.675) == 2.68  # Binary float is 2.67499..., repr is 2.675
    assert round2(-0.001) == 0.0
    assert round2(18.461538) == 18.46


def test_to_amount_coercion():
    assert to_amount("12.5") == 12.5
    assert to_amount(None) == 0
    assert to_amount("") == 0
    assert to_amount(float("nan")) == 0
    assert to_amount(True) == 0


def test_snapshot_from_record_planner_fields():
    snapshot = EnvelopeSnapshot.from_record(
        {
            "envelopeType": " Income ",
            "priority": "Essential",
            "frequency": "quarterly",
            "next_payment_due": "2024-06-01",
        }
    )

    assert snapshot.envelope_type == "income"
    assert snapshot.is_expense is False
    assert snapshot.priority == "essential"
    assert snapshot.frequency == "quarterly"
    assert snapshot.next_payment_due == date(2024, 6, 1)


def test_round2_large_amounts():
    """Amounts beyond 26 digits keep their value instead of failing to quantize"""
    assert round2(1e30) == 1e30
    assert round2(-1e300) == -1e300
    assert round2(float("inf")) == float("inf")
