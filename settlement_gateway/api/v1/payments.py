"""Payment reconciliation endpoints"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from settlement_gateway.api.dependencies import get_backoffice_client, get_request_id, unprocessable
from settlement_gateway.api.v1.schemas import (
    AccountPaymentRequest,
    ReconcileRequest,
    ReconciliationResponse,
    payment_from_schema,
    reconciliation_to_schema,
)
from settlement_gateway.domain.exceptions import (
    BackofficeAPIError,
    InvalidBackofficeDataError,
    ResourceNotFoundError,
)
from settlement_gateway.domain.models import (
    AccountBalance,
    PaymentRequest,
    ReconciliationError,
    ReconciliationResult,
)
from settlement_gateway.domain.money import to_cents
from settlement_gateway.domain.reconciliation import apply_payment
from settlement_gateway.infrastructure.clients.backoffice import BackofficeClient
from settlement_gateway.infrastructure.observability.logging import log_payment_reconciled
from settlement_gateway.infrastructure.observability.metrics import record_reconciliation

router = APIRouter()


def reconcile_or_reject(
    account: AccountBalance,
    payment: PaymentRequest,
    request_id: str,
    start_time: float,
    account_id: str | None = None,
) -> ReconciliationResult:
    """Run the reconciler, recording the outcome; rejections become 422"""
    result = apply_payment(account, payment)
    duration_ms = (time.time() - start_time) * 1000

    if isinstance(result, ReconciliationError):
        record_reconciliation(payment.mode.value, result.reason.value)
        log_payment_reconciled(request_id, account_id, payment.mode.value, result.reason.value, 0, duration_ms)
        raise unprocessable(result.reason.value, result.message, fields=list(result.fields))

    outcome = "settled" if result.became_settled else "partial"
    record_reconciliation(payment.mode.value, outcome)
    log_payment_reconciled(
        request_id, account_id, payment.mode.value, outcome, result.applied_amount_cents, duration_ms
    )
    return result


@router.post("/payments/reconcile", response_model=ReconciliationResponse)
def reconcile_payment(request_body: ReconcileRequest, request: Request):
    """
    Compute the balance transition for a payment without committing it.

    Returns:
        Applied amount, resulting outstanding balance and whether the account settles
    """
    start_time = time.time()
    account = AccountBalance(
        original_amount_cents=to_cents(request_body.account.original_amount),
        outstanding_amount_cents=to_cents(request_body.account.outstanding_amount),
    )
    result = reconcile_or_reject(
        account,
        payment_from_schema(request_body.payment),
        get_request_id(request),
        start_time,
    )
    return reconciliation_to_schema(result)


@router.post("/accounts/{account_id}/payments", response_model=ReconciliationResponse)
async def pay_account(
    account_id: str,
    request_body: AccountPaymentRequest,
    request: Request,
    backoffice: BackofficeClient = Depends(get_backoffice_client),
):
    """
    Apply a total or partial payment to a payable/receivable.

    Flow:
    1. Read the current balance from the back office
    2. Reconcile the payment against it
    3. Forward the reconciled payment to the back office

    Concurrent payments against the same account must be serialized by the
    back office; this endpoint only computes and forwards.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    payment = payment_from_schema(request_body)

    try:
        account = await backoffice.get_account(account_id, kind=request_body.kind)
        result = reconcile_or_reject(account, payment, request_id, start_time, account_id=account_id)
        await backoffice.make_payment(account_id, payment, result, kind=request_body.kind)

    except ResourceNotFoundError as e:
        logging.warning(f"Account not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Account not found")

    except BackofficeAPIError as e:
        logging.error(f"Back-office error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Back-office service unavailable")

    except InvalidBackofficeDataError as e:
        logging.error(f"Invalid back-office data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Invalid back-office response")

    except HTTPException:
        raise

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return reconciliation_to_schema(result)
