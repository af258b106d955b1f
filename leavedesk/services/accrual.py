"""Leave entitlement arithmetic: continuous casual accrual and yearly medical accrual."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

# Roughly one casual day per 33 calendar days, about 11 days a year.
CASUAL_ACCRUAL_RATE_PER_DAY = Decimal("0.03030303")
INITIAL_MEDICAL_LEAVE_DAYS = 12
MEDICAL_LEAVE_DAYS_PER_YEAR = 12

_CENT = Decimal("0.01")
_ZERO = Decimal("0.00")


def round_days(value: Decimal) -> Decimal:
    """Round a day count to two decimals, half-up."""
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def days_since(start: datetime, now: datetime) -> int:
    """Whole days elapsed between start and now, floored (negative if start is ahead)."""
    return (now - start) // timedelta(days=1)


def compute_casual_leave_balance(
    account_created_at: datetime,
    total_approved_days_used: Decimal | int,
    now: datetime,
) -> Decimal:
    """Current casual entitlement: accrued since account creation minus approved usage.

    Clamped at zero, so an account created "in the future" or one that has
    used more than it accrued reads as an empty balance.
    """
    accrued = days_since(account_created_at, now) * CASUAL_ACCRUAL_RATE_PER_DAY
    balance = accrued - Decimal(total_approved_days_used)
    return round_days(max(_ZERO, balance))


def full_years_between(start: datetime, end: datetime) -> int:
    """Number of complete years from start to end (0 when end precedes start)."""
    years = end.year - start.year
    if (end.month, end.day, end.time()) < (start.month, start.day, start.time()):
        years -= 1
    return max(0, years)


def compute_medical_accrual(last_accrual_at: datetime, now: datetime) -> int:
    """Medical days to credit now for the full years since the last yearly accrual."""
    years = full_years_between(last_accrual_at, now)
    return years * MEDICAL_LEAVE_DAYS_PER_YEAR
