"""Unit tests for casual and medical leave accrual arithmetic (no DB)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from leavedesk.services.accrual import (
    CASUAL_ACCRUAL_RATE_PER_DAY,
    MEDICAL_LEAVE_DAYS_PER_YEAR,
    compute_casual_leave_balance,
    compute_medical_accrual,
    days_since,
    full_years_between,
    round_days,
)

NOW = datetime(2025, 3, 3, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Casual leave
# ---------------------------------------------------------------------------


def test_accrual_rate_is_about_eleven_days_a_year() -> None:
    yearly = CASUAL_ACCRUAL_RATE_PER_DAY * 365
    assert Decimal("11") <= yearly < Decimal("11.1")


def test_new_account_has_zero_casual_balance() -> None:
    assert compute_casual_leave_balance(NOW, 0, NOW) == Decimal("0.00")


def test_casual_balance_after_330_days_is_ten() -> None:
    created = NOW - timedelta(days=330)
    assert compute_casual_leave_balance(created, 0, NOW) == Decimal("10.00")


def test_casual_balance_after_66_days_is_two() -> None:
    created = NOW - timedelta(days=66)
    assert compute_casual_leave_balance(created, 0, NOW) == Decimal("2.00")


def test_casual_balance_subtracts_approved_usage() -> None:
    created = NOW - timedelta(days=330)
    assert compute_casual_leave_balance(created, 3, NOW) == Decimal("7.00")


def test_partial_days_are_floored() -> None:
    created = NOW - timedelta(days=33, hours=23)
    # 33 whole days * rate = 0.99999999 -> 1.00
    assert compute_casual_leave_balance(created, 0, NOW) == Decimal("1.00")


def test_balance_never_negative_when_usage_exceeds_accrual() -> None:
    created = NOW - timedelta(days=10)
    assert compute_casual_leave_balance(created, 5, NOW) == Decimal("0.00")


def test_future_account_creation_clamps_to_zero() -> None:
    created = NOW + timedelta(days=30)
    assert days_since(created, NOW) == -30
    assert compute_casual_leave_balance(created, 0, NOW) == Decimal("0.00")


def test_balance_non_decreasing_as_time_advances() -> None:
    created = NOW - timedelta(days=100)
    previous = compute_casual_leave_balance(created, 2, NOW)
    for step in range(1, 400):
        current = compute_casual_leave_balance(created, 2, NOW + timedelta(days=step))
        assert current >= previous
        previous = current


def test_balance_has_two_decimal_places() -> None:
    created = NOW - timedelta(days=17)
    result = compute_casual_leave_balance(created, 0, NOW)
    assert result == Decimal("0.52")
    assert result.as_tuple().exponent == -2


def test_round_days_half_up() -> None:
    assert round_days(Decimal("1.005")) == Decimal("1.01")
    assert round_days(Decimal("1.004")) == Decimal("1.00")


# ---------------------------------------------------------------------------
# Medical leave
# ---------------------------------------------------------------------------


def test_full_years_exact_anniversary() -> None:
    assert full_years_between(NOW.replace(year=2023), NOW) == 2


def test_full_years_day_before_anniversary() -> None:
    start = NOW.replace(year=2024) + timedelta(days=1)
    assert full_years_between(start, NOW) == 0


def test_full_years_never_negative() -> None:
    assert full_years_between(NOW + timedelta(days=800), NOW) == 0


def test_medical_accrual_two_years() -> None:
    assert compute_medical_accrual(NOW.replace(year=2023), NOW) == 2 * MEDICAL_LEAVE_DAYS_PER_YEAR == 24


def test_medical_accrual_none_within_first_year() -> None:
    assert compute_medical_accrual(NOW - timedelta(days=364), NOW) == 0
