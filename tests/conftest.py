"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from envelope_engine.config import settings
from envelope_engine.domain.models import EnvelopeSnapshot


@pytest.fixture
def today() -> date:
    """Fixed clock for due-date calculations"""
    return date(2024, 3, 15)


@pytest.fixture
def lenient_custom_weeks() -> Generator[None, None, None]:
    """Allow custom_weeks bills without a week count (legacy fallback)"""
    previous = settings.strict_custom_weeks
    settings.strict_custom_weeks = False
    try:
        yield
    finally:
        settings.strict_custom_weeks = previous


@pytest.fixture
def sample_envelopes() -> list[EnvelopeSnapshot]:
    """Household envelopes as they come back from storage"""
    return [
        # Rent: fully funded
        EnvelopeSnapshot(current_amount=1800, target_amount=1800, pay_cycle_amount=830.77),
        # Car insurance: behind
        EnvelopeSnapshot(current_amount=200, target_amount=600, pay_cycle_amount=23.08),
        # Holiday savings: ahead
        EnvelopeSnapshot(current_amount=1300, target_amount=1200, pay_cycle_amount=46.15),
        # Groceries: spending envelope
        EnvelopeSnapshot(current_amount=90, target_amount=400, is_spending=True, pay_cycle_amount=184.62),
        # Coffee: tracked only
        EnvelopeSnapshot(current_amount=12, is_tracking_only=True),
    ]
