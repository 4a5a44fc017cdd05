"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from settlement_gateway.domain.models import (
    ByCount,
    Installment,
    InstallmentOverride,
    PaymentMode,
    PaymentRequest,
    PaymentType,
    ReconciliationResult,
    ScheduleIntent,
)
from settlement_gateway.domain.money import to_cents


class InstallmentSchema(BaseModel):
    """Single installment in a schedule"""

    number: int = Field(..., ge=1)
    amount: Decimal
    due_date: Optional[date] = None
    description: str = ""
    period_start: Optional[date] = None
    period_end: Optional[date] = None


class IntentSchema(BaseModel):
    """Parsed installment text"""

    kind: Literal["count", "offsets"]
    count: Optional[int] = None
    offsets: Optional[List[int]] = None


class SchedulePreviewRequest(BaseModel):
    """Request body for POST /v1/schedules/preview"""

    total: Decimal = Field(..., gt=0, description="Order total in major units")
    anchor_date: date = Field(..., description="Order date")
    payment_type: PaymentType = PaymentType.INSTALLMENTS
    spec: Optional[str] = Field(None, description='Installment text, e.g. "3x" or "30/60/90"')
    is_grouped: bool = False
    order_number: Optional[str] = None


class ScheduleResponse(BaseModel):
    """Generated or validated schedule"""

    payment_type: PaymentType
    total: Decimal
    intent: Optional[IntentSchema] = None
    installments: List[InstallmentSchema]
    valid: bool = True
    warnings: List[str] = []


class InstallmentOverrideSchema(BaseModel):
    """User edit of one installment"""

    number: int = Field(..., ge=1)
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None


class ScheduleValidateRequest(BaseModel):
    """Request body for POST /v1/schedules/validate"""

    total: Decimal = Field(..., gt=0)
    installments: List[InstallmentSchema]
    overrides: List[InstallmentOverrideSchema] = []


class CreatePayablesRequest(BaseModel):
    """Request body for POST /v1/orders/{order_id}/payables"""

    total: Decimal = Field(..., gt=0)
    payment_type: PaymentType = PaymentType.INSTALLMENTS
    installments: List[InstallmentSchema] = []
    overrides: List[InstallmentOverrideSchema] = []


class CreatePayablesResponse(BaseModel):
    """Response for POST /v1/orders/{order_id}/payables"""

    order_id: str
    payment_type: PaymentType
    total: Decimal
    installment_count: int


class AccountSchema(BaseModel):
    """Current balance of a payable/receivable"""

    original_amount: Decimal
    outstanding_amount: Decimal


class PaymentSchema(BaseModel):
    """Payment action against one account"""

    mode: PaymentMode
    interest: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    explicit_amount: Decimal = Decimal("0")
    payment_date: Optional[date] = None
    bank_account_ref: Optional[str] = None


class ReconcileRequest(BaseModel):
    """Request body for POST /v1/payments/reconcile"""

    account: AccountSchema
    payment: PaymentSchema


class AccountPaymentRequest(PaymentSchema):
    """Request body for POST /v1/accounts/{account_id}/payments"""

    kind: Literal["payable", "receivable"] = "payable"


class ReconciliationResponse(BaseModel):
    """Computed balance transition"""

    applied_amount: Decimal
    new_outstanding: Decimal
    became_settled: bool


class QuantityRoundRequest(BaseModel):
    """Request body for POST /v1/quantities/round"""

    quantities: List[int]
    mode: Literal["import", "smart"] = "import"


class QuantityRoundResponse(BaseModel):
    """Rounded quantities, in request order"""

    quantities: List[int]


def installment_to_schema(inst: Installment) -> InstallmentSchema:
    return InstallmentSchema(
        number=inst.number,
        amount=inst.amount,
        due_date=inst.due_date,
        description=inst.description,
        period_start=inst.period_start,
        period_end=inst.period_end,
    )


def installment_from_schema(schema: InstallmentSchema) -> Installment:
    return Installment(
        number=schema.number,
        due_date=schema.due_date,
        amount_cents=to_cents(schema.amount),
        description=schema.description,
        period_start=schema.period_start,
        period_end=schema.period_end,
    )


def override_from_schema(schema: InstallmentOverrideSchema) -> InstallmentOverride:
    return InstallmentOverride(
        number=schema.number,
        amount_cents=to_cents(schema.amount) if schema.amount is not None else None,
        due_date=schema.due_date,
    )


def intent_to_schema(intent: ScheduleIntent) -> IntentSchema:
    if isinstance(intent, ByCount):
        return IntentSchema(kind="count", count=intent.count)
    return IntentSchema(kind="offsets", offsets=list(intent.offsets))


def payment_from_schema(schema: PaymentSchema) -> PaymentRequest:
    return PaymentRequest(
        mode=schema.mode,
        payment_date=schema.payment_date,
        bank_account_ref=schema.bank_account_ref,
        interest_cents=to_cents(schema.interest),
        discount_cents=to_cents(schema.discount),
        explicit_amount_cents=to_cents(schema.explicit_amount),
    )


def reconciliation_to_schema(result: ReconciliationResult) -> ReconciliationResponse:
    return ReconciliationResponse(
        applied_amount=result.applied_amount,
        new_outstanding=result.new_outstanding,
        became_settled=result.became_settled,
    )
