"""Payment reconciliation - applies total/partial payments against an account balance"""

import logging
from typing import Union

from settlement_gateway.domain.models import (
    AccountBalance,
    PaymentMode,
    PaymentRequest,
    ReconciliationError,
    ReconciliationErrorReason,
    ReconciliationResult,
)

logger = logging.getLogger(__name__)


def _missing_fields(request: PaymentRequest) -> tuple:
    missing = []
    if request.payment_date is None:
        missing.append("payment_date")
    if not request.bank_account_ref:
        missing.append("bank_account_ref")
    return tuple(missing)


def calculate_applied_amount(original_cents: int, request: PaymentRequest) -> int:
    """
    Amount the payment actually moves.

    Total: original + interest - discount.
    Partial: the explicit amount; interest and discount are ignored.
    """
    if request.mode == PaymentMode.TOTAL:
        return original_cents + request.interest_cents - request.discount_cents
    return request.explicit_amount_cents


def apply_payment(
    account: AccountBalance,
    request: PaymentRequest,
) -> Union[ReconciliationResult, ReconciliationError]:
    """
    Compute the balance transition for one payment action.

    Rules:
    - payment date and bank account are required in both modes
    - the applied amount must be positive
    - a partial payment must be smaller than the original amount (use total mode otherwise)
    - a total payment settles the account; interest and discount only change what moves
    - a partial payment reduces the outstanding amount, settling it once it reaches zero

    The account is not mutated; the caller commits the returned transition.
    """
    missing = _missing_fields(request)
    if missing:
        return ReconciliationError(
            reason=ReconciliationErrorReason.MISSING_REQUIRED_FIELD,
            message=f"Missing required field(s): {', '.join(missing)}",
            fields=missing,
        )

    # Payables may be stored negative; the obligation is always the absolute value
    original_cents = abs(account.original_amount_cents)
    outstanding_cents = max(0, account.outstanding_amount_cents)

    if outstanding_cents == 0:
        return ReconciliationError(
            reason=ReconciliationErrorReason.EXCEEDS_OUTSTANDING,
            message="Account is already settled",
        )

    if request.mode == PaymentMode.TOTAL and (request.interest_cents < 0 or request.discount_cents < 0):
        return ReconciliationError(
            reason=ReconciliationErrorReason.INVALID_ADJUSTMENT,
            message="Interest and discount cannot be negative",
            fields=tuple(
                name
                for name, value in (("interest", request.interest_cents), ("discount", request.discount_cents))
                if value < 0
            ),
        )

    applied_cents = calculate_applied_amount(original_cents, request)

    if applied_cents <= 0:
        return ReconciliationError(
            reason=ReconciliationErrorReason.NON_POSITIVE_AMOUNT,
            message="Payment amount must be greater than zero",
        )

    if request.mode == PaymentMode.TOTAL:
        new_outstanding = 0
    else:
        if applied_cents >= original_cents:
            return ReconciliationError(
                reason=ReconciliationErrorReason.EXCEEDS_OUTSTANDING,
                message="A partial payment must be smaller than the original amount; use a total payment instead",
            )
        new_outstanding = max(0, outstanding_cents - applied_cents)

    logger.debug(
        "Reconciled %s payment: applied=%s outstanding %s -> %s",
        request.mode.value,
        applied_cents,
        outstanding_cents,
        new_outstanding,
    )

    return ReconciliationResult(
        applied_amount_cents=applied_cents,
        new_outstanding_cents=new_outstanding,
        became_settled=new_outstanding == 0,
    )
