"""User edits and submission checks for generated schedules"""

from dataclasses import replace
from typing import Iterable, List, Optional, Union

from settlement_gateway.domain.models import (
    Installment,
    InstallmentOverride,
    ScheduleValidationError,
    ScheduleValidationReason,
)
from settlement_gateway.domain.money import Number, from_cents, to_cents


def apply_overrides(
    installments: List[Installment],
    overrides: Iterable[InstallmentOverride],
) -> Union[List[Installment], ScheduleValidationError]:
    """
    Merge user edits into a schedule, returning a new list.

    Overrides address installments by number; fields left as None keep the
    generated value. Installment numbers must be unique. The merged schedule
    still has to pass validate_schedule.
    """
    by_number = {}
    for inst in installments:
        if inst.number in by_number:
            return ScheduleValidationError(
                reason=ScheduleValidationReason.DUPLICATE_INSTALLMENT,
                message=f"Installment {inst.number} appears more than once in this schedule",
            )
        by_number[inst.number] = inst
    merged = dict(by_number)

    for override in overrides:
        if override.number not in by_number:
            return ScheduleValidationError(
                reason=ScheduleValidationReason.UNKNOWN_INSTALLMENT,
                message=f"Installment {override.number} does not exist in this schedule",
            )
        current = merged[override.number]
        changes = {}
        if override.amount_cents is not None:
            changes["amount_cents"] = override.amount_cents
        if override.due_date is not None:
            changes["due_date"] = override.due_date
        merged[override.number] = replace(current, **changes)

    return [merged[inst.number] for inst in installments]


def validate_schedule(
    installments: List[Installment],
    total: Number,
) -> Optional[ScheduleValidationError]:
    """
    Re-check a (possibly user-edited) schedule before submission.

    Checks run in order and the first failure is returned:
    non-empty, sum equals total to the cent, every due date set, every amount > 0.
    Returns None when the schedule can be submitted.
    """
    if not installments:
        return ScheduleValidationError(
            reason=ScheduleValidationReason.EMPTY_SCHEDULE,
            message="Configure the installments before continuing",
        )

    total_cents = to_cents(total)
    installments_cents = sum(inst.amount_cents for inst in installments)
    if installments_cents != total_cents:
        difference = installments_cents - total_cents
        return ScheduleValidationError(
            reason=ScheduleValidationReason.SUM_MISMATCH,
            message=(
                f"Installments total {from_cents(installments_cents)} does not match "
                f"order total {from_cents(total_cents)} (difference {from_cents(abs(difference))})"
            ),
            difference_cents=difference,
        )

    if any(inst.due_date is None for inst in installments):
        return ScheduleValidationError(
            reason=ScheduleValidationReason.MISSING_DUE_DATE,
            message="Every installment needs a due date",
        )

    if any(inst.amount_cents <= 0 for inst in installments):
        return ScheduleValidationError(
            reason=ScheduleValidationReason.NON_POSITIVE_INSTALLMENT,
            message="Every installment must be greater than zero",
        )

    return None
