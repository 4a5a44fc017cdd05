"""POST /v1/orders/{order_id}/payables - submit a reviewed schedule to the back office"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from settlement_gateway.api.dependencies import get_backoffice_client, get_request_id
from settlement_gateway.api.v1.schedules import review_schedule
from settlement_gateway.api.v1.schemas import CreatePayablesRequest, CreatePayablesResponse
from settlement_gateway.domain.exceptions import (
    BackofficeAPIError,
    InvalidBackofficeDataError,
    ResourceNotFoundError,
)
from settlement_gateway.domain.models import PaymentType
from settlement_gateway.domain.money import from_cents, to_cents
from settlement_gateway.infrastructure.clients.backoffice import BackofficeClient
from settlement_gateway.infrastructure.observability.logging import log_schedule_generated

router = APIRouter()


@router.post("/orders/{order_id}/payables", response_model=CreatePayablesResponse)
async def create_order_payables(
    order_id: str,
    request_body: CreatePayablesRequest,
    request: Request,
    backoffice: BackofficeClient = Depends(get_backoffice_client),
):
    """
    Persist an order's payment schedule.

    Flow:
    1. Merge user overrides and re-validate the schedule (installments only)
    2. Forward the schedule to the back office
    3. Return the number of payables created
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if request_body.payment_type == PaymentType.INSTALLMENTS:
        installments = review_schedule(
            request_body.total,
            request_body.installments,
            request_body.overrides,
            request_id,
            order_id=order_id,
        )
    else:
        installments = []

    try:
        await backoffice.create_payables(order_id, request_body.payment_type, installments)

    except ResourceNotFoundError as e:
        logging.warning(f"Order not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Order not found")

    except BackofficeAPIError as e:
        logging.error(f"Back-office error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Back-office service unavailable")

    except InvalidBackofficeDataError as e:
        logging.error(f"Invalid back-office response: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Invalid back-office response")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    log_schedule_generated(
        request_id,
        "submitted",
        len(installments) or 1,
        to_cents(request_body.total),
        duration_ms,
        order_id=order_id,
    )

    return CreatePayablesResponse(
        order_id=order_id,
        payment_type=request_body.payment_type,
        total=from_cents(to_cents(request_body.total)),
        installment_count=len(installments) or 1,
    )
