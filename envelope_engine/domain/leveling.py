"""Leveled bills - even per-pay saving for bills that swing with the seasons"""

from datetime import date
from typing import Iterable

from envelope_engine.domain.contributions import MONTHS_PER_YEAR, pay_cycles_per_year
from envelope_engine.domain.exceptions import InvalidLevelingDataError
from envelope_engine.domain.models import BufferState, BufferStatus, LevelingData, PayFrequency
from envelope_engine.utils.date_utils import parse_date
from envelope_engine.utils.money import round2, to_amount

DEFAULT_BUFFER_PERCENT = 10.0

AHEAD_PERCENT = 110
ON_TRACK_PERCENT = 90
BEHIND_PERCENT = 50


def create_leveling_data(
    monthly_amounts: Iterable[float],
    buffer_percent: float = DEFAULT_BUFFER_PERCENT,
) -> LevelingData:
    """Leveling data from twelve monthly estimates, January first"""
    amounts = [to_amount(amount) for amount in monthly_amounts]
    if len(amounts) != MONTHS_PER_YEAR:
        raise InvalidLevelingDataError(f"Must provide exactly 12 monthly amounts, got {len(amounts)}")

    return LevelingData(
        monthly_amounts=amounts,
        yearly_average=sum(amounts) / MONTHS_PER_YEAR,
        buffer_percent=to_amount(buffer_percent),
    )


def _buffer_multiplier(leveling: LevelingData) -> float:
    return 1 + leveling.buffer_percent / 100


def calculate_leveled_pay_cycle_amount(leveling: LevelingData, pay_frequency: PayFrequency | str) -> float:
    """
    Amount to save each pay so the buffered yearly average covers the year.

    Example:
        Average $150/month, 10% buffer, paid fortnightly
        150 * 1.10 * 12 = 1980, / 26 = 76.15
    """
    yearly_total = leveling.yearly_average * _buffer_multiplier(leveling) * MONTHS_PER_YEAR
    return round2(yearly_total / pay_cycles_per_year(pay_frequency))


def _classify_buffer(percentage: float) -> BufferState:
    if percentage >= AHEAD_PERCENT:
        return BufferState.AHEAD
    if percentage >= ON_TRACK_PERCENT:
        return BufferState.ON_TRACK
    if percentage >= BEHIND_PERCENT:
        return BufferState.BEHIND
    return BufferState.CRITICAL


def calculate_buffer_status(
    leveling: LevelingData,
    current_balance: float,
    start_month: int,
    current_month: int | None = None,
    today: date | None = None,
) -> BufferStatus:
    """
    Compare a leveled envelope's balance with what it should hold this month.

    Months are numbered 1-12. `current_month` defaults to the month of
    `today`. Both ends count, and a start month after the current one wraps
    through December.

    Expected balance = buffered average * months elapsed - the monthly
    estimates for those months. A non-positive expected balance counts as
    100% of expected.
    """
    if current_month is None:
        current_month = (parse_date(today) or date.today()).month
    current_balance = to_amount(current_balance)

    months_elapsed = (current_month - start_month) % MONTHS_PER_YEAR + 1
    expected_spent = sum(
        leveling.monthly_amounts[(start_month - 1 + offset) % MONTHS_PER_YEAR] for offset in range(months_elapsed)
    )
    expected_saved = leveling.yearly_average * months_elapsed * _buffer_multiplier(leveling)
    expected_balance = expected_saved - expected_spent

    percentage = current_balance / expected_balance * 100 if expected_balance > 0 else 100.0

    return BufferStatus(
        expected_balance=round2(expected_balance),
        actual_balance=current_balance,
        buffer_amount=round2(current_balance - expected_balance),
        status=_classify_buffer(percentage),
        percentage_of_expected=percentage,
    )
