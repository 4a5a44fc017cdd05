"""Unit tests for user overrides and submission validation"""

from datetime import date
from decimal import Decimal
from settlement_gateway.domain.models import (
    ByCount,
    Installment,
    InstallmentOverride,
    ScheduleValidationError,
    ScheduleValidationReason,
)
from settlement_gateway.domain.schedule import generate_schedule
from settlement_gateway.domain.schedule_review import apply_overrides, validate_schedule


def _schedule():
    return generate_schedule(Decimal("1000.00"), date(2024, 1, 1), ByCount(3), False)


def test_generated_schedule_is_valid():
    assert validate_schedule(_schedule(), Decimal("1000.00")) is None


def test_override_returns_new_schedule():
    """Test overrides do not touch the generated schedule"""
    original = _schedule()
    merged = apply_overrides(
        original,
        [
            InstallmentOverride(number=1, amount_cents=50000),
            InstallmentOverride(number=3, amount_cents=16667, due_date=date(2024, 4, 15)),
        ],
    )

    assert [inst.amount_cents for inst in merged] == [50000, 33333, 16667]
    assert merged[2].due_date == date(2024, 4, 15)
    assert merged[1] is original[1]
    assert original[0].amount_cents == 33333
    assert validate_schedule(merged, Decimal("1000.00")) is None


def test_override_unknown_number():
    result = apply_overrides(_schedule(), [InstallmentOverride(number=4, amount_cents=100)])

    assert isinstance(result, ScheduleValidationError)
    assert result.reason == ScheduleValidationReason.UNKNOWN_INSTALLMENT


def test_duplicate_installment_numbers_rejected():
    """Test rows sharing a number are rejected instead of folded into one"""
    installments = [
        Installment(number=1, due_date=date(2024, 2, 1), amount_cents=6000),
        Installment(number=1, due_date=date(2024, 3, 1), amount_cents=4000),
    ]
    result = apply_overrides(installments, [])

    assert isinstance(result, ScheduleValidationError)
    assert result.reason == ScheduleValidationReason.DUPLICATE_INSTALLMENT
    assert "Installment 1" in result.message


def test_sum_mismatch_after_edit():
    """Test an edit that breaks the total is caught with the difference"""
    merged = apply_overrides(_schedule(), [InstallmentOverride(number=1, amount_cents=40000)])
    error = validate_schedule(merged, Decimal("1000.00"))

    assert error.reason == ScheduleValidationReason.SUM_MISMATCH
    assert error.difference_cents == 6667
    assert "66.67" in error.message


def test_one_cent_mismatch_rejected():
    merged = apply_overrides(_schedule(), [InstallmentOverride(number=3, amount_cents=33333)])
    error = validate_schedule(merged, Decimal("1000.00"))

    assert error.reason == ScheduleValidationReason.SUM_MISMATCH
    assert error.difference_cents == -1


def test_empty_schedule():
    assert validate_schedule([], Decimal("10.00")).reason == ScheduleValidationReason.EMPTY_SCHEDULE


def test_missing_due_date():
    installments = [
        Installment(number=1, due_date=date(2024, 1, 1), amount_cents=500),
        Installment(number=2, due_date=None, amount_cents=500),
    ]
    assert validate_schedule(installments, Decimal("10.00")).reason == ScheduleValidationReason.MISSING_DUE_DATE


def test_non_positive_installment():
    """Test a zero row is rejected even when the sum matches"""
    installments = [
        Installment(number=1, due_date=date(2024, 1, 1), amount_cents=0),
        Installment(number=2, due_date=date(2024, 2, 1), amount_cents=1000),
    ]
    error = validate_schedule(installments, Decimal("10.00"))
    assert error.reason == ScheduleValidationReason.NON_POSITIVE_INSTALLMENT


def test_sum_checked_before_dates():
    installments = [Installment(number=1, due_date=None, amount_cents=1)]
    assert validate_schedule(installments, Decimal("10.00")).reason == ScheduleValidationReason.SUM_MISMATCH


def test_tiny_total_leaves_zero_rows():
    """Test 0.05 over 12 generates zero rows that submission rejects"""
    installments = generate_schedule(Decimal("0.05"), date(2024, 1, 1), ByCount(12), False)

    assert sum(inst.amount_cents for inst in installments) == 5
    assert installments[-1].amount_cents == 5
    error = validate_schedule(installments, Decimal("0.05"))
    assert error.reason == ScheduleValidationReason.NON_POSITIVE_INSTALLMENT
