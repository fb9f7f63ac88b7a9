"""Domain models - enumerations and value dataclasses for envelope budgeting"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, List, Mapping

from envelope_engine.domain.exceptions import InvalidFrequencyError
from envelope_engine.utils.date_utils import parse_date
from envelope_engine.utils.money import to_amount


class _FrequencyEnum(str, Enum):
    """String enum that tolerates case and whitespace differences in stored values"""

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, value: Any, strict: bool = False):
        """
        Resolve a raw value (member or string) to a member.

        Returns None for unknown values unless strict=True, in which case
        InvalidFrequencyError is raised. Members of the other frequency
        axis are never converted, even when their strings match.
        """
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, _FrequencyEnum):
                raise ValueError(f"{type(value).__name__} is not a {cls.__name__}")
            return cls(value)
        except ValueError:
            if strict:
                raise InvalidFrequencyError(f"Unknown {cls.__name__}: {value!r}")
            return None


class PayFrequency(_FrequencyEnum):
    """How often the person being budgeted for is paid"""

    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    TWICE_MONTHLY = "twice_monthly"
    MONTHLY = "monthly"


class BillFrequency(_FrequencyEnum):
    """How often the obligation being funded recurs"""

    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    ANNUALLY = "annually"
    CUSTOM = "custom"
    CUSTOM_WEEKS = "custom_weeks"
    NONE = "none"


class StatusBucket(str, Enum):
    """Funding classification of a single envelope"""

    ON_TRACK = "on-track"
    NEEDS_ATTENTION = "needs-attention"
    SURPLUS = "surplus"
    NO_TARGET = "no-target"
    SPENDING = "spending"
    TRACKING = "tracking"

    @classmethod
    def _missing_(cls, value: object):
        # Older screens stored "healthy"/"attention" for the same buckets
        if isinstance(value, str):
            return _BUCKET_ALIASES.get(value.strip().lower())
        return None


_BUCKET_ALIASES = {
    "healthy": StatusBucket.ON_TRACK,
    "attention": StatusBucket.NEEDS_ATTENTION,
    "on-track": StatusBucket.ON_TRACK,
    "needs-attention": StatusBucket.NEEDS_ATTENTION,
    "surplus": StatusBucket.SURPLUS,
    "no-target": StatusBucket.NO_TARGET,
    "spending": StatusBucket.SPENDING,
    "tracking": StatusBucket.TRACKING,
}


class FundingStatus(str, Enum):
    """Actual balance compared with the expected balance"""

    UNDER = "under"
    OVER = "over"
    ON_TRACK = "on-track"


class Urgency(str, Enum):
    OVERDUE = "overdue"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class SurplusStatus(str, Enum):
    AVAILABLE = "available"
    EXACT = "exact"
    SHORTFALL = "shortfall"


class EnvelopeType(str, Enum):
    """What an envelope holds; only expenses take regular allocations"""

    EXPENSE = "expense"
    INCOME = "income"
    SAVINGS = "savings"


class Priority(str, Enum):
    ESSENTIAL = "essential"
    IMPORTANT = "important"
    DISCRETIONARY = "discretionary"


class GapStatus(str, Enum):
    """Saved balance against the even saving line towards a due date"""

    AHEAD = "ahead"
    ON_TRACK = "on-track"
    BEHIND = "behind"


class BufferState(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on-track"
    BEHIND = "behind"
    CRITICAL = "critical"


@dataclass(frozen=True)
class EnvelopeSnapshot:
    """Funding fields of an envelope, as read from storage"""

    current_amount: float = 0.0
    target_amount: float = 0.0
    is_tracking_only: bool = False
    is_spending: bool = False
    pay_cycle_amount: float = 0.0
    envelope_type: str = EnvelopeType.EXPENSE.value
    priority: str | None = None
    frequency: str | None = None
    next_payment_due: date | None = None

    @property
    def is_expense(self) -> bool:
        return self.envelope_type == EnvelopeType.EXPENSE.value

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EnvelopeSnapshot":
        """Build a snapshot from a storage row (snake_case or camelCase keys)"""

        def pick(snake: str, camel: str) -> Any:
            value = record.get(snake)
            return record.get(camel) if value is None else value

        return cls(
            current_amount=to_amount(pick("current_amount", "currentAmount")),
            target_amount=to_amount(pick("target_amount", "targetAmount")),
            is_tracking_only=bool(pick("is_tracking_only", "isTrackingOnly")),
            is_spending=bool(pick("is_spending", "isSpending")),
            pay_cycle_amount=to_amount(pick("pay_cycle_amount", "payCycleAmount")),
            envelope_type=_normalized(pick("envelope_type", "envelopeType")) or EnvelopeType.EXPENSE.value,
            priority=_normalized(record.get("priority")),
            frequency=_normalized(record.get("frequency")),
            next_payment_due=parse_date(pick("next_payment_due", "nextPaymentDue")),
        )


@dataclass
class DueProgress:
    """Countdown towards a due date"""

    progress: float
    label: str
    remaining_days: int = 0
    formatted: str | None = None


@dataclass
class PaySchedule:
    """Next pay date and how often pay arrives"""

    next_pay_date: date
    pay_frequency: PayFrequency


@dataclass
class PaysUntilDue:
    """Bill urgency measured in paychecks"""

    pays: int  # -1 means overdue
    days_until_due: int
    urgency: Urgency
    display_text: str


@dataclass
class PaydaySummary:
    """Regular allocations for one paycheck and what is left over"""

    pay_amount: float
    total_regular: float
    surplus: float
    surplus_status: SurplusStatus
    essential_total: float = 0.0
    important_total: float = 0.0
    discretionary_total: float = 0.0
    behind_count: int = 0
    total_gap: float = 0.0


@dataclass
class EnvelopeHealth:
    """Where an expense envelope should be on its saving line, and how urgent it is"""

    priority: str | None
    due_date: date | None
    total_due_amount: float
    current_balance: float
    should_have_saved: float
    gap: float  # Positive means behind
    gap_status: GapStatus
    percent_complete: float
    regular_per_pay: float
    days_until_due: int | None
    pays_until_due: int | None
    priority_score: float  # Lower is more urgent
    priority_reason: str


@dataclass
class LevelingData:
    """Twelve monthly estimates (January first) for a seasonal bill"""

    monthly_amounts: List[float]
    yearly_average: float
    buffer_percent: float = 10.0


@dataclass
class BufferStatus:
    expected_balance: float
    actual_balance: float
    buffer_amount: float
    status: BufferState
    percentage_of_expected: float


def _normalized(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip().lower()
