"""Money rounding and numeric coercion helpers"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any

CENT = Decimal("0.01")

# Enough digits to quantize any finite float (max exponent 308) to cents
ROUNDING_PRECISION = 400


def round2(value: float) -> float:
    """
    Round a money amount to cents, half-up.

    Goes through the float's shortest repr so that 18.465 rounds to 18.47
    rather than to the binary neighbour below it.
    """
    value = float(value)
    # Overflowed arithmetic has no cents to round
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        ctx.prec = ROUNDING_PRECISION
        rounded = Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    # Avoid handing back -0.0 for tiny negative results
    return float(rounded) + 0.0


def to_amount(value: Any) -> float:
    """Coerce a stored numeric field to float; missing or unparseable values become 0.0"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount
