"""Pay-cycle contribution engine - converts bill amounts into per-paycheck set-asides"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, Mapping

from envelope_engine.config import settings
from envelope_engine.domain.exceptions import InvalidCustomWeeksError
from envelope_engine.domain.models import (
    BillFrequency,
    EnvelopeSnapshot,
    FundingStatus,
    GapStatus,
    PayFrequency,
    PaydaySummary,
    Priority,
    SurplusStatus,
)
from envelope_engine.domain.health import calculate_all_envelope_health
from envelope_engine.infrastructure.observability.logging import log_fallback
from envelope_engine.infrastructure.observability.metrics import (
    record_custom_weeks_fallback,
    record_frequency_fallback,
)
from envelope_engine.utils.money import round2, to_amount

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12

PAY_CYCLES_PER_YEAR: Dict[PayFrequency, int] = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.FORTNIGHTLY: 26,
    PayFrequency.TWICE_MONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}

# Months covered by one occurrence of the bill
MONTHS_PER_OCCURRENCE: Dict[BillFrequency, float] = {
    BillFrequency.WEEKLY: 1 / 4.33,
    BillFrequency.FORTNIGHTLY: 1 / 2.17,
    BillFrequency.MONTHLY: 1,
    BillFrequency.QUARTERLY: 3,
    BillFrequency.ANNUAL: 12,
    BillFrequency.ANNUALLY: 12,
    BillFrequency.CUSTOM: 1,
}
DEFAULT_MONTHS_PER_OCCURRENCE = 1

# Occurrences per year, used when annualising a planner target
OCCURRENCES_PER_YEAR: Dict[BillFrequency, int] = {
    BillFrequency.WEEKLY: 52,
    BillFrequency.FORTNIGHTLY: 26,
    BillFrequency.MONTHLY: 12,
    BillFrequency.QUARTERLY: 4,
    BillFrequency.ANNUAL: 1,
    BillFrequency.ANNUALLY: 1,
    BillFrequency.NONE: 0,
}


def pay_cycles_per_year(pay_frequency: PayFrequency | str) -> int:
    """Pay cycles in a year; unknown frequencies count as monthly"""
    frequency = PayFrequency.parse(pay_frequency)
    if frequency is None:
        record_frequency_fallback("pay")
        log_fallback(logger, "pay_cycles_per_year", pay_frequency=str(pay_frequency))
        return PAY_CYCLES_PER_YEAR[PayFrequency.MONTHLY]
    return PAY_CYCLES_PER_YEAR[frequency]


def months_per_occurrence(bill_frequency: BillFrequency | str) -> float:
    frequency = BillFrequency.parse(bill_frequency)
    if frequency is None:
        record_frequency_fallback("bill")
        logger.debug("Unknown bill frequency %r, using monthly", bill_frequency)
    return MONTHS_PER_OCCURRENCE.get(frequency, DEFAULT_MONTHS_PER_OCCURRENCE)


def annualize_bill(
    amount: float,
    bill_frequency: BillFrequency | str,
    custom_weeks: float | None = None,
) -> float:
    """
    Total yearly cost of a bill (unrounded).

    custom_weeks bills recur every `custom_weeks` weeks. Without a positive
    week count the combination is rejected unless strict_custom_weeks is
    disabled, in which case the monthly-equivalent divisor is used.
    """
    if BillFrequency.parse(bill_frequency) is BillFrequency.CUSTOM_WEEKS:
        weeks = to_amount(custom_weeks)
        if weeks > 0:
            return amount * (WEEKS_PER_YEAR / weeks)
        if settings.strict_custom_weeks:
            raise InvalidCustomWeeksError(
                f"custom_weeks frequency requires a positive week count, got {custom_weeks!r}"
            )
        record_custom_weeks_fallback()
        log_fallback(logger, "annualize_bill", bill_frequency="custom_weeks", custom_weeks=custom_weeks)

    return amount * MONTHS_PER_YEAR / months_per_occurrence(bill_frequency)


def calculate_pay_cycle_amount(
    amount: float,
    bill_frequency: BillFrequency | str,
    pay_frequency: PayFrequency | str,
    custom_weeks: float | None = None,
) -> float:
    """
    Amount to set aside each pay so a year of contributions covers the bill.

    Requirements:
    - Non-positive or missing amounts give 0 (no error)
    - Bill amount annualised via months-per-occurrence, or 52/custom_weeks
    - Annual amount spread across the pay cycles in a year
    - Result rounded half-up to cents

    Example:
        $120 quarterly, paid fortnightly
        annual = 120 * 12 / 3 = 480
        480 / 26 = 18.4615 -> 18.46
    """
    amount = to_amount(amount)
    if amount <= 0:
        return 0.0

    annual = annualize_bill(amount, bill_frequency, custom_weeks)
    per_cycle = annual / pay_cycles_per_year(pay_frequency)

    return round2(per_cycle)


def _pay_cycle_amount_of(envelope: EnvelopeSnapshot | Mapping[str, Any]) -> float:
    if isinstance(envelope, Mapping):
        return EnvelopeSnapshot.from_record(envelope).pay_cycle_amount
    return to_amount(getattr(envelope, "pay_cycle_amount", 0))


def calculate_total_monthly_allocation(
    envelopes: Iterable[EnvelopeSnapshot | Mapping[str, Any]],
    pay_frequency: PayFrequency | str,
) -> float:
    """Monthly-equivalent total of every envelope's per-pay contribution"""
    per_cycle_total = sum(_pay_cycle_amount_of(envelope) for envelope in envelopes)
    monthly = per_cycle_total * pay_cycles_per_year(pay_frequency) / MONTHS_PER_YEAR
    return round2(monthly)


def calculate_remaining_income(total_income: float, total_allocation: float) -> float:
    """Income left after allocations; negative means over-allocated"""
    return round2(to_amount(total_income) - to_amount(total_allocation))


def determine_status(
    current: float,
    expected: float,
    tolerance: float | None = None,
) -> FundingStatus:
    """
    Compare an actual balance with where it should be.

    Tolerance is an absolute money band either side of `expected`
    (default from settings, 5.0).
    """
    if tolerance is None:
        tolerance = settings.status_tolerance
    current = to_amount(current)
    expected = to_amount(expected)

    if current < expected - tolerance:
        return FundingStatus.UNDER
    if current > expected + tolerance:
        return FundingStatus.OVER
    return FundingStatus.ON_TRACK


def calculate_annual_from_target(target: float, frequency: BillFrequency | str) -> float:
    """Yearly total for a planner target repeating at `frequency`"""
    target = to_amount(target)
    if target <= 0:
        return 0.0
    occurrences = OCCURRENCES_PER_YEAR.get(BillFrequency.parse(frequency), MONTHS_PER_YEAR)
    return round2(target * occurrences)


def calculate_required_contribution(annual_amount: float, pay_frequency: PayFrequency | str) -> float:
    """Per-pay contribution for an already annualised amount"""
    annual_amount = to_amount(annual_amount)
    if annual_amount <= 0:
        return 0.0
    return round2(annual_amount / pay_cycles_per_year(pay_frequency))


def summarize_payday(
    pay_amount: float,
    envelopes: Iterable[EnvelopeSnapshot | Mapping[str, Any]],
    pay_frequency: PayFrequency | str | None = None,
    today: date | None = None,
) -> PaydaySummary:
    """
    Split one paycheck into regular allocations and surplus (or shortfall).

    Only expense envelopes take a regular allocation; income and savings
    envelopes are left out of every total. When `pay_frequency` is given the
    summary also counts the envelopes behind their saving line and the
    total they are short by.
    """
    expenses = [
        snapshot
        for snapshot in (
            EnvelopeSnapshot.from_record(envelope) if isinstance(envelope, Mapping) else envelope
            for envelope in envelopes
        )
        if snapshot.is_expense
    ]

    pay_amount = round2(to_amount(pay_amount))
    total_regular = round2(sum(_pay_cycle_amount_of(envelope) for envelope in expenses))
    surplus = round2(pay_amount - total_regular)

    if surplus > 0:
        surplus_status = SurplusStatus.AVAILABLE
    elif surplus == 0:
        surplus_status = SurplusStatus.EXACT
    else:
        surplus_status = SurplusStatus.SHORTFALL

    priority_totals = {priority.value: 0.0 for priority in Priority}
    for envelope in expenses:
        if envelope.priority in priority_totals:
            priority_totals[envelope.priority] += _pay_cycle_amount_of(envelope)

    behind = []
    if pay_frequency is not None:
        behind = [
            health
            for health in calculate_all_envelope_health(expenses, pay_frequency, today=today)
            if health.gap_status is GapStatus.BEHIND
        ]

    return PaydaySummary(
        pay_amount=pay_amount,
        total_regular=total_regular,
        surplus=surplus,
        surplus_status=surplus_status,
        essential_total=round2(priority_totals[Priority.ESSENTIAL.value]),
        important_total=round2(priority_totals[Priority.IMPORTANT.value]),
        discretionary_total=round2(priority_totals[Priority.DISCRETIONARY.value]),
        behind_count=len(behind),
        total_gap=round2(sum(health.gap for health in behind)),
    )
