"""Domain models - pure Python dataclasses representing scheduling and settlement values"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

from settlement_gateway.domain.money import from_cents


@dataclass(frozen=True)
class ByCount:
    """Split the total into `count` equal installments"""

    count: int


@dataclass(frozen=True)
class ByOffsets:
    """One installment per day offset from the anchor date, in supplied order"""

    offsets: Tuple[int, ...]


ScheduleIntent = Union[ByCount, ByOffsets]


class PaymentType(str, Enum):
    """How an order total is settled"""

    LUMP_SUM = "lump_sum"  # single payment on the order date
    INSTALLMENTS = "installments"


@dataclass(frozen=True)
class Installment:
    """Single scheduled amount/due-date pair within a payment plan"""

    number: int
    due_date: Optional[date]
    amount_cents: int
    description: str = ""
    period_start: Optional[date] = None  # grouped orders only
    period_end: Optional[date] = None

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)


class ParseErrorReason(str, Enum):
    INVALID_FORMAT_FOR_GROUPED = "invalid_format_for_grouped"
    INVALID_FORMAT_FOR_UNGROUPED = "invalid_format_for_ungrouped"
    COUNT_OUT_OF_RANGE = "count_out_of_range"
    OFFSETS_COUNT_OUT_OF_RANGE = "offsets_count_out_of_range"


@dataclass(frozen=True)
class ParseError:
    """Installment text the parser could not turn into an intent"""

    reason: ParseErrorReason
    message: str


class ScheduleValidationReason(str, Enum):
    EMPTY_SCHEDULE = "empty_schedule"
    SUM_MISMATCH = "sum_mismatch"
    MISSING_DUE_DATE = "missing_due_date"
    NON_POSITIVE_INSTALLMENT = "non_positive_installment"
    UNKNOWN_INSTALLMENT = "unknown_installment"
    DUPLICATE_INSTALLMENT = "duplicate_installment"


@dataclass(frozen=True)
class ScheduleValidationError:
    """Schedule rejected at submission time"""

    reason: ScheduleValidationReason
    message: str
    difference_cents: int = 0  # installments total minus order total, SUM_MISMATCH only


@dataclass(frozen=True)
class InstallmentOverride:
    """User edit of a generated installment, applied by number"""

    number: int
    amount_cents: Optional[int] = None
    due_date: Optional[date] = None


@dataclass(frozen=True)
class AccountBalance:
    """Payable/receivable as read from the back office"""

    original_amount_cents: int
    outstanding_amount_cents: int
    due_date: Optional[date] = None
    is_paid: bool = False


class PaymentMode(str, Enum):
    TOTAL = "total"
    PARTIAL = "partial"


@dataclass(frozen=True)
class PaymentRequest:
    """Payment action against a single account"""

    mode: PaymentMode
    payment_date: Optional[date]
    bank_account_ref: Optional[str]
    interest_cents: int = 0
    discount_cents: int = 0
    explicit_amount_cents: int = 0  # PARTIAL only


@dataclass(frozen=True)
class ReconciliationResult:
    """Transition for the caller to commit; the account itself is never mutated"""

    applied_amount_cents: int
    new_outstanding_cents: int
    became_settled: bool

    @property
    def applied_amount(self) -> Decimal:
        return from_cents(self.applied_amount_cents)

    @property
    def new_outstanding(self) -> Decimal:
        return from_cents(self.new_outstanding_cents)


class ReconciliationErrorReason(str, Enum):
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    EXCEEDS_OUTSTANDING = "exceeds_outstanding"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_ADJUSTMENT = "invalid_adjustment"


@dataclass(frozen=True)
class ReconciliationError:
    """Payment request rejected by business rules"""

    reason: ReconciliationErrorReason
    message: str
    fields: Tuple[str, ...] = field(default_factory=tuple)
