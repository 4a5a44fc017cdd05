"""POST /v1/schedules/* - installment schedule preview and review endpoints"""

import time
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Request

from settlement_gateway.api.dependencies import get_request_id, unprocessable
from settlement_gateway.api.v1.schemas import (
    InstallmentOverrideSchema,
    InstallmentSchema,
    SchedulePreviewRequest,
    ScheduleResponse,
    ScheduleValidateRequest,
    installment_from_schema,
    installment_to_schema,
    intent_to_schema,
    override_from_schema,
)
from settlement_gateway.domain.intent_parser import parse_installment_spec
from settlement_gateway.domain.models import (
    ByOffsets,
    Installment,
    ParseError,
    PaymentType,
    ScheduleValidationError,
    ScheduleValidationReason,
)
from settlement_gateway.domain.money import from_cents, to_cents
from settlement_gateway.domain.schedule import generate_lump_sum, generate_schedule
from settlement_gateway.domain.schedule_review import apply_overrides, validate_schedule
from settlement_gateway.infrastructure.observability.logging import log_schedule_generated, log_schedule_rejected
from settlement_gateway.infrastructure.observability.metrics import (
    parse_failure_counter,
    record_schedule,
    schedule_cadence,
    schedule_validation_failure_counter,
)

router = APIRouter()


def review_schedule(
    total: Decimal,
    installments: List[InstallmentSchema],
    overrides: List[InstallmentOverrideSchema],
    request_id: str,
    order_id: str | None = None,
) -> List[Installment]:
    """
    Merge user overrides into a submitted schedule and re-validate it.

    Raises:
        HTTPException(422): With the first failing validation reason
    """
    merged = apply_overrides(
        [installment_from_schema(inst) for inst in installments],
        [override_from_schema(o) for o in overrides],
    )

    error = merged if isinstance(merged, ScheduleValidationError) else validate_schedule(merged, total)
    if error is not None:
        schedule_validation_failure_counter.labels(reason=error.reason.value).inc()
        log_schedule_rejected(request_id, error.reason.value, order_id=order_id)
        extra = {}
        if error.reason == ScheduleValidationReason.SUM_MISMATCH:
            extra["difference"] = str(from_cents(error.difference_cents))
        raise unprocessable(error.reason.value, error.message, **extra)

    return merged


@router.post("/schedules/preview", response_model=ScheduleResponse)
def preview_schedule(request_body: SchedulePreviewRequest, request: Request):
    """
    Generate an installment schedule from the user's installment text.

    Lump-sum orders get a single installment due on the order date; otherwise
    the text is parsed ("3x", "30/60/90") and split into installments that
    sum exactly to the total.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if request_body.payment_type == PaymentType.LUMP_SUM:
        intent = None
        installments = generate_lump_sum(request_body.total, request_body.anchor_date, request_body.order_number)
        cadence = schedule_cadence(request_body.is_grouped, False, lump_sum=True)
    else:
        intent = parse_installment_spec(request_body.spec or "", request_body.is_grouped)
        if isinstance(intent, ParseError):
            parse_failure_counter.labels(reason=intent.reason.value).inc()
            log_schedule_rejected(request_id, intent.reason.value)
            raise unprocessable(intent.reason.value, intent.message)

        installments = generate_schedule(
            request_body.total,
            request_body.anchor_date,
            intent,
            request_body.is_grouped,
            order_number=request_body.order_number,
        )
        cadence = schedule_cadence(request_body.is_grouped, isinstance(intent, ByOffsets))

    # Tiny totals can leave a non-positive last installment; submission would reject it
    warning = validate_schedule(installments, request_body.total)

    duration_ms = (time.time() - start_time) * 1000
    record_schedule(cadence, len(installments))
    log_schedule_generated(request_id, cadence, len(installments), to_cents(request_body.total), duration_ms)

    return ScheduleResponse(
        payment_type=request_body.payment_type,
        total=from_cents(to_cents(request_body.total)),
        intent=intent_to_schema(intent) if intent is not None else None,
        installments=[installment_to_schema(inst) for inst in installments],
        valid=warning is None,
        warnings=[warning.message] if warning is not None else [],
    )


@router.post("/schedules/validate", response_model=ScheduleResponse)
def validate_submitted_schedule(request_body: ScheduleValidateRequest, request: Request):
    """
    Apply user edits to a generated schedule and check it can be submitted.

    Returns:
        The merged schedule, or 422 with the failing reason
    """
    request_id = get_request_id(request)
    installments = review_schedule(
        request_body.total,
        request_body.installments,
        request_body.overrides,
        request_id,
    )

    return ScheduleResponse(
        payment_type=PaymentType.INSTALLMENTS,
        total=from_cents(to_cents(request_body.total)),
        installments=[installment_to_schema(inst) for inst in installments],
    )
