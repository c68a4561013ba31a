from datetime import date, datetime

import pytest

from perkcycle.domain.errors import ConfigurationError, UnsupportedCycleError
from perkcycle.domain.models import CycleWindow, ExpiryResult, ExpiryStatus, MultipleWindowsCycle, SingleCycle
from perkcycle.engine.cycles import NEVER_EXPIRES
from perkcycle.engine.expiry import calculate_next_expiry, classify_expiry, is_expiring_soon


def _result(days: int) -> ExpiryResult:
    return ExpiryResult(
        next_reset_date=date(2025, 1, 1),
        next_expiry_date=date(2025, 1, 1),
        days_until_expiry=days,
        current_cycle_end=date(2025, 1, 1),
    )


def test_monthly_expiry():
    result = calculate_next_expiry("MONTHLY", '{"type": "single"}', date(2025, 3, 15))

    assert result.current_cycle_end == date(2025, 3, 31)
    assert result.next_expiry_date == date(2025, 3, 31)
    assert result.next_reset_date == date(2025, 4, 1)
    assert result.days_until_expiry == 16


def test_explicit_expiry_overrides_one_time_sentinel():
    result = calculate_next_expiry("ONE_TIME", '{"type": "single", "expiryDate": "2026-06-30"}', date(2025, 8, 1))

    assert result.next_expiry_date == date(2026, 6, 30)
    assert result.current_cycle_end == NEVER_EXPIRES
    assert result.next_reset_date == NEVER_EXPIRES
    assert result.days_until_expiry == 333


def test_explicit_expiry_keeps_recurring_mechanics():
    definition = SingleCycle(expiry_date=date(2026, 6, 30))
    result = calculate_next_expiry("MONTHLY", definition, date(2025, 8, 1))

    assert result.next_expiry_date == date(2026, 6, 30)
    assert result.current_cycle_end == date(2025, 8, 31)
    assert result.next_reset_date == date(2025, 9, 1)


def test_days_until_expiry_is_zero_on_expiry_day():
    result = calculate_next_expiry("MONTHLY", {"type": "single"}, date(2025, 3, 31))
    assert result.days_until_expiry == 0


def test_days_until_expiry_ignores_time_of_day():
    result = calculate_next_expiry("MONTHLY", {"type": "single"}, datetime(2025, 3, 30, 23, 59))
    assert result.days_until_expiry == 1


def test_days_until_expiry_negative_after_hard_deadline():
    result = calculate_next_expiry("ONE_TIME", {"type": "single", "expiryDate": "2025-07-01"}, date(2025, 8, 1))

    assert result.days_until_expiry == -31
    assert classify_expiry(result) == ExpiryStatus.EXPIRED
    assert not is_expiring_soon(result)


def test_semiannual_expiry_with_typed_definition():
    definition = MultipleWindowsCycle(
        windows=[
            CycleWindow(start_month=1, start_day=1, end_month=6, end_day=30),
            CycleWindow(start_month=7, start_day=1, end_month=12, end_day=31),
        ]
    )
    result = calculate_next_expiry("SEMIANNUAL_CALENDAR", definition, date(2025, 12, 20))

    assert result.current_cycle_end == date(2025, 12, 31)
    assert result.next_reset_date == date(2026, 1, 1)
    assert result.days_until_expiry == 11


def test_cardmember_year_expiry():
    result = calculate_next_expiry("CARDMEMBER_YEAR", {"type": "single"}, date(2025, 1, 15), "03-01")

    assert result.next_expiry_date == date(2025, 3, 1)
    assert result.next_reset_date == date(2025, 3, 2)
    assert result.days_until_expiry == 45


def test_calculation_is_idempotent():
    args = ("SEMIANNUAL_CALENDAR", '{"type": "multiple_windows", "windows": [{"startMonth": 1, "startDay": 1, "endMonth": 6, "endDay": 30}]}', date(2025, 4, 15))

    first = calculate_next_expiry(*args)
    second = calculate_next_expiry(*args)

    assert first == second
    assert first.model_dump() == second.model_dump()


def test_errors_propagate():
    with pytest.raises(UnsupportedCycleError):
        calculate_next_expiry("BOGUS", {"type": "single"}, date(2025, 4, 1))
    with pytest.raises(ConfigurationError):
        calculate_next_expiry("CARDMEMBER_YEAR", {"type": "single"}, date(2025, 4, 1))
    with pytest.raises(ConfigurationError):
        calculate_next_expiry("MONTHLY", "not json", date(2025, 4, 1))


@pytest.mark.parametrize(
    "days, expected",
    [(-1, False), (0, True), (29, True), (30, True), (31, False)],
)
def test_is_expiring_soon_default_threshold(days, expected):
    assert is_expiring_soon(_result(days)) is expected


def test_is_expiring_soon_custom_threshold():
    assert is_expiring_soon(_result(60), threshold_days=60)
    assert not is_expiring_soon(_result(61), threshold_days=60)
    assert not is_expiring_soon(_result(-5), threshold_days=60)


@pytest.mark.parametrize(
    "days, expected",
    [
        (-1, ExpiryStatus.EXPIRED),
        (0, ExpiryStatus.EXPIRING_SOON),
        (30, ExpiryStatus.EXPIRING_SOON),
        (31, ExpiryStatus.UPCOMING),
    ],
)
def test_classify_expiry(days, expected):
    assert classify_expiry(_result(days)) == expected
