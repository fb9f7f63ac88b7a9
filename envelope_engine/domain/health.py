"""Envelope health - saved balance against an even saving line towards the due date"""

import math
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping

from envelope_engine.domain.models import (
    BillFrequency,
    EnvelopeHealth,
    EnvelopeSnapshot,
    GapStatus,
    PayFrequency,
)
from envelope_engine.utils.date_utils import add_months, days_between, parse_date
from envelope_engine.utils.money import to_amount

# Average days per pay, used to count pays between two dates
DAYS_PER_PAY: Dict[PayFrequency, float] = {
    PayFrequency.WEEKLY: 7,
    PayFrequency.FORTNIGHTLY: 14,
    PayFrequency.TWICE_MONTHLY: 14,
    PayFrequency.MONTHLY: 30.44,
}

# Months back to the previous due date; weekly bills step in days instead
MONTHS_BETWEEN_DUE_DATES: Dict[BillFrequency, int] = {
    BillFrequency.MONTHLY: 1,
    BillFrequency.QUARTERLY: 3,
    BillFrequency.ANNUAL: 12,
    BillFrequency.ANNUALLY: 12,
    BillFrequency.NONE: 12,
}
DAYS_BETWEEN_DUE_DATES: Dict[BillFrequency, int] = {
    BillFrequency.WEEKLY: 7,
    BillFrequency.FORTNIGHTLY: 14,
}
# One-off bills are saved for over the year before they fall due
ONE_OFF_FREQUENCIES = {"", "once"}

GAP_TOLERANCE = 50.0
NO_DUE_DATE_SCORE = 9999
NO_DUE_DATE_REASON = "No due date set"


def calculate_pays_between(start: date, end: date, pay_frequency: PayFrequency | str) -> int:
    """
    Pays landing between two dates, rounded up.

    twice_monthly counts as fortnightly; unknown frequencies give 0.
    """
    days_per_pay = DAYS_PER_PAY.get(PayFrequency.parse(pay_frequency))
    if days_per_pay is None:
        return 0
    return math.ceil(days_between(start, end) / days_per_pay)


def calculate_last_due_date(next_due: date, frequency: BillFrequency | str | None) -> date:
    """
    Start of the current saving period: the previous time the bill fell due.

    Missing and one-off frequencies look back a year. custom and custom_weeks
    bills have no known spacing, so the due date itself is returned.
    """
    if frequency is None or (isinstance(frequency, str) and frequency.strip().lower() in ONE_OFF_FREQUENCIES):
        return add_months(next_due, -12)

    parsed = BillFrequency.parse(frequency)
    if parsed in DAYS_BETWEEN_DUE_DATES:
        return next_due - timedelta(days=DAYS_BETWEEN_DUE_DATES[parsed])
    if parsed in MONTHS_BETWEEN_DUE_DATES:
        return add_months(next_due, -MONTHS_BETWEEN_DUE_DATES[parsed])
    return next_due


def _classify_gap(gap: float) -> GapStatus:
    if gap < -GAP_TOLERANCE:
        return GapStatus.AHEAD
    if gap <= GAP_TOLERANCE:
        return GapStatus.ON_TRACK
    return GapStatus.BEHIND


def _priority_reason(gap_status: GapStatus, gap: float, days_until_due: int) -> str:
    if gap_status is GapStatus.AHEAD:
        return f"On track with ${abs(gap):.2f} buffer"
    if gap_status is GapStatus.ON_TRACK:
        return "On track for due date"
    return f"{days_until_due} days until due, ${gap:.2f} behind schedule"


def calculate_envelope_health(
    envelope: EnvelopeSnapshot | Mapping[str, Any],
    pay_frequency: PayFrequency | str,
    today: date | None = None,
) -> EnvelopeHealth:
    """
    Compare an envelope's balance with what it should hold by today.

    Requirements:
    - Saving period runs from the previous due date to the next one
    - Even share per pay = target / pays in the period
    - Should have saved = share * pays so far, capped at the target
    - Gap within $50 either side is on track; larger shortfalls are behind
    - Priority score: max(1, 100 - days until due) plus the gap as a
      percentage of the target (lower scores are more urgent)

    Example:
        $600 due 2024-04-14, monthly bill, paid fortnightly, today 2024-03-15
        period 2024-03-14 .. 2024-04-14 = 31 days = 3 pays, $200 per pay
        1 pay so far -> should have saved 200
    """
    if isinstance(envelope, Mapping):
        envelope = EnvelopeSnapshot.from_record(envelope)

    total_due = to_amount(envelope.target_amount)
    balance = to_amount(envelope.current_amount)
    due_date = parse_date(envelope.next_payment_due)

    if due_date is None:
        return EnvelopeHealth(
            priority=envelope.priority,
            due_date=None,
            total_due_amount=total_due,
            current_balance=balance,
            should_have_saved=0.0,
            gap=0.0,
            gap_status=GapStatus.ON_TRACK,
            percent_complete=100.0,
            regular_per_pay=to_amount(envelope.pay_cycle_amount),
            days_until_due=None,
            pays_until_due=None,
            priority_score=NO_DUE_DATE_SCORE,
            priority_reason=NO_DUE_DATE_REASON,
        )

    today = parse_date(today) or date.today()

    period_start = calculate_last_due_date(due_date, envelope.frequency)
    pays_so_far = calculate_pays_between(period_start, today, pay_frequency)
    pays_in_period = calculate_pays_between(period_start, due_date, pay_frequency)

    regular_per_pay = total_due / pays_in_period if pays_in_period > 0 else 0.0
    should_have_saved = min(regular_per_pay * pays_so_far, total_due)

    gap = should_have_saved - balance
    percent_complete = balance / should_have_saved * 100 if should_have_saved > 0 else 100.0
    gap_status = _classify_gap(gap)

    days_until_due = days_between(today, due_date)
    urgency_weight = max(1, 100 - days_until_due)
    gap_weight = gap / total_due * 100 if gap > 0 and total_due > 0 else 0.0

    return EnvelopeHealth(
        priority=envelope.priority,
        due_date=due_date,
        total_due_amount=total_due,
        current_balance=balance,
        should_have_saved=should_have_saved,
        gap=gap,
        gap_status=gap_status,
        percent_complete=percent_complete,
        regular_per_pay=regular_per_pay,
        days_until_due=days_until_due,
        pays_until_due=calculate_pays_between(today, due_date, pay_frequency),
        priority_score=urgency_weight + gap_weight,
        priority_reason=_priority_reason(gap_status, gap, days_until_due),
    )


def calculate_all_envelope_health(
    envelopes: Iterable[EnvelopeSnapshot | Mapping[str, Any]],
    pay_frequency: PayFrequency | str,
    today: date | None = None,
) -> List[EnvelopeHealth]:
    """Health of every expense envelope, in input order"""
    snapshots = [
        EnvelopeSnapshot.from_record(envelope) if isinstance(envelope, Mapping) else envelope
        for envelope in envelopes
    ]
    return [
        calculate_envelope_health(snapshot, pay_frequency, today=today)
        for snapshot in snapshots
        if snapshot.is_expense
    ]
