"""Due-date math - countdown progress and bill urgency measured in paychecks"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping

from envelope_engine.domain.models import DueProgress, PayFrequency, PaySchedule, PaysUntilDue, Urgency
from envelope_engine.infrastructure.observability.logging import log_fallback
from envelope_engine.utils.date_utils import add_months, clamp_day, days_between, format_day_month_year, parse_date

logger = logging.getLogger(__name__)

NO_DUE_DATE_LABEL = "No due date"
DUE_TODAY_LABEL = "Due today"

# Approximate spacing between paychecks; monthly uses 30 days
DAYS_BETWEEN_PAYS: Dict[PayFrequency, int] = {
    PayFrequency.WEEKLY: 7,
    PayFrequency.FORTNIGHTLY: 14,
    PayFrequency.MONTHLY: 30,
}
DEFAULT_DAYS_BETWEEN_PAYS = 14


def _resolve_today(today: date | None) -> date:
    return parse_date(today) or date.today()


def _schedule_frequency(value: PayFrequency | str | None, fallback: PayFrequency) -> PayFrequency:
    """Narrow a pay frequency to weekly/fortnightly/monthly for scheduling"""
    frequency = PayFrequency.parse(value)
    if frequency is PayFrequency.TWICE_MONTHLY:
        return PayFrequency.FORTNIGHTLY  # Approximate
    return frequency or fallback


def calculate_due_progress(next_due_date: Any, today: date | None = None) -> DueProgress:
    """
    Countdown towards the next due date.

    Requirements:
    - No date (or an unparseable one) -> progress 0, "No due date"
    - Window runs from today to the due date; overdue dates collapse it to zero width
    - Remaining days clamp at 0, so overdue shows "Due today" at 100%
    - Date formatted dd/MM/yyyy
    """
    if next_due_date is None or next_due_date == "":
        return DueProgress(progress=0, label=NO_DUE_DATE_LABEL)

    due_date = parse_date(next_due_date)
    if due_date is None:
        log_fallback(logger, "calculate_due_progress", next_due_date=str(next_due_date))
        return DueProgress(progress=0, label=NO_DUE_DATE_LABEL)

    today = _resolve_today(today)

    window_start = due_date if due_date < today else today
    # Floor of 1 day avoids dividing by zero
    total_window = max(days_between(window_start, due_date), 0) or 1
    remaining = max(days_between(today, due_date), 0)

    progress = ((total_window - remaining) / total_window) * 100
    progress = min(max(progress, 0), 100)

    label = DUE_TODAY_LABEL if remaining == 0 else f"{remaining} days left"

    return DueProgress(
        progress=progress,
        label=label,
        remaining_days=remaining,
        formatted=format_day_month_year(due_date),
    )


def next_due_date(value: Any, today: date | None = None) -> date | None:
    """
    Next occurrence of a bill's day of month.

    `value` is a day number (1-31), a date, or an ISO string whose day is used.
    Days past the end of a short month fall on its last day.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        due_day = value
    else:
        parsed = parse_date(value)
        if parsed is None:
            return None
        due_day = parsed.day

    due_day = max(1, min(31, due_day))
    today = _resolve_today(today)

    if today.day <= due_day:
        return clamp_day(today.year, today.month, due_day)

    next_month = add_months(today.replace(day=1), 1)
    return clamp_day(next_month.year, next_month.month, due_day)


def ensure_next_pay_date_is_future(
    stored_date: date,
    pay_frequency: PayFrequency | str,
    today: date | None = None,
) -> date:
    """Advance a stored pay date by whole pay cycles until it is today or later"""
    today = _resolve_today(today)
    frequency = _schedule_frequency(pay_frequency, PayFrequency.FORTNIGHTLY)
    next_pay = parse_date(stored_date)
    if next_pay is None:
        raise ValueError(f"Not a date: {stored_date!r}")

    if frequency is PayFrequency.MONTHLY:
        # Step from the stored date so month-end days do not drift
        months = 0
        candidate = next_pay
        while candidate < today:
            months += 1
            candidate = add_months(next_pay, months)
        return candidate

    step = timedelta(days=DAYS_BETWEEN_PAYS[frequency])
    while next_pay < today:
        next_pay += step
    return next_pay


def _classify_pays(pays: int, is_funded: bool) -> tuple[Urgency, str]:
    if is_funded:
        # Funded bills show information without urgency
        if pays < 0:
            return Urgency.NONE, "Overdue"
        if pays == 0:
            return Urgency.NONE, "Due soon"
        return Urgency.NONE, f"{pays} pay{'s' if pays != 1 else ''}"

    if pays < 0:
        return Urgency.OVERDUE, "Overdue!"
    if pays == 0:
        return Urgency.HIGH, "Due now!"
    if pays == 1:
        return Urgency.HIGH, "1 pay!"
    if pays == 2:
        return Urgency.MEDIUM, "2 pays"
    if pays <= 4:
        return Urgency.LOW, f"{pays} pays"
    return Urgency.NONE, f"{pays} pays"


def calculate_pays_until_due(
    due_date: Any,
    pay_schedule: PaySchedule,
    is_funded: bool,
    today: date | None = None,
) -> PaysUntilDue | None:
    """
    How many paychecks land before a bill is due.

    - Overdue -> pays = -1
    - Due on or before the next pay -> 0
    - Otherwise 1 + whole pay intervals after the next pay

    Returns None when the bill has no usable due date.
    """
    due = parse_date(due_date)
    if due is None:
        return None

    today = _resolve_today(today)
    frequency = _schedule_frequency(pay_schedule.pay_frequency, PayFrequency.FORTNIGHTLY)
    next_pay = ensure_next_pay_date_is_future(pay_schedule.next_pay_date, frequency, today)

    days_until_due = days_between(today, due)
    days_until_next_pay = days_between(today, next_pay)
    days_between_pays = DAYS_BETWEEN_PAYS.get(frequency, DEFAULT_DAYS_BETWEEN_PAYS)

    if days_until_due < 0:
        pays = -1
    elif days_until_due <= days_until_next_pay:
        pays = 0
    else:
        days_after_next_pay = days_until_due - days_until_next_pay
        pays = 1 + days_after_next_pay // days_between_pays

    urgency, display_text = _classify_pays(pays, is_funded)

    return PaysUntilDue(
        pays=pays,
        days_until_due=days_until_due,
        urgency=urgency,
        display_text=display_text,
    )


def primary_pay_schedule(
    income_sources: Iterable[Mapping[str, Any]],
    fallback_pay_cycle: PayFrequency | str = PayFrequency.FORTNIGHTLY,
    today: date | None = None,
) -> PaySchedule | None:
    """
    Pay schedule of the income source paying soonest.

    Inactive sources and sources without a parseable next pay date are
    ignored. twice_monthly is approximated as fortnightly.
    """
    fallback = _schedule_frequency(fallback_pay_cycle, PayFrequency.FORTNIGHTLY)

    candidates: List[tuple[date, Mapping[str, Any]]] = []
    for source in income_sources:
        active = source.get("is_active", source.get("isActive"))
        if active is False:
            continue
        pay_date = parse_date(source.get("next_pay_date") or source.get("nextPayDate"))
        if pay_date is None:
            continue
        candidates.append((pay_date, source))

    if not candidates:
        return None

    pay_date, primary = min(candidates, key=lambda item: item[0])
    frequency = _schedule_frequency(primary.get("frequency"), fallback)

    return PaySchedule(
        next_pay_date=ensure_next_pay_date_is_future(pay_date, frequency, today),
        pay_frequency=frequency,
    )
