"""Installment schedule generation for order payables/receivables"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from settlement_gateway.domain.models import ByCount, ByOffsets, Installment, ScheduleIntent
from settlement_gateway.domain.money import Number, redistribute_remainder, split_evenly, to_cents
from settlement_gateway.utils.date_utils import add_days, format_short_date, monday_on_or_before

MONTHLY_STEP_DAYS = 30
WEEK_DAYS = 7
SETTLEMENT_GRACE_DAYS = 5


def weekly_bucket(anchor_date: date, index: int) -> Tuple[date, date, date]:
    """
    Bucket `index` of a grouped order: (week_start, week_end, due_date).

    Weeks run Monday to Sunday starting from the week that contains the anchor
    date; payment is due the Friday after the bucket closes.
    """
    week_start = monday_on_or_before(anchor_date) + timedelta(days=WEEK_DAYS * index)
    week_end = add_days(week_start, WEEK_DAYS - 1)
    due_date = add_days(week_end, SETTLEMENT_GRACE_DAYS)
    return week_start, week_end, due_date


def _equal_amounts(total_cents: int, parts: int) -> List[int]:
    share = split_evenly(total_cents, parts)
    return redistribute_remainder([share] * parts, total_cents)


def _label(order_number: Optional[str], number: int, count: int) -> str:
    prefix = f"Order {order_number}" if order_number else "Order"
    return f"{prefix} - Installment {number}/{count}"


def generate_schedule(
    total: Number,
    anchor_date: date,
    intent: ScheduleIntent,
    is_grouped: bool,
    order_number: Optional[str] = None,
) -> List[Installment]:
    """
    Split an order total into dated installments.

    Cadences:
    - ByCount, ungrouped: due every 30 days after the anchor (fixed steps, not calendar months)
    - ByCount, grouped: one weekly bucket per installment, due the Friday after each bucket's Sunday
    - ByOffsets: due anchor + offset days, in the order supplied (no sorting)

    Every row gets round(total / n); the last row absorbs the rounding remainder
    so the schedule sums to the total exactly.

    Args:
        total: Order total in major units
        anchor_date: Order date the schedule is measured from
        intent: Output of parse_installment_spec
        is_grouped: Whether the order is consolidated weekly
        order_number: Used in installment descriptions

    Example:
        1000.00, "3x" -> [333.33, 333.33, 333.34]
    """
    total_cents = to_cents(total)

    if isinstance(intent, ByOffsets):
        count = len(intent.offsets)
        amounts = _equal_amounts(total_cents, count)
        return [
            Installment(
                number=i + 1,
                due_date=add_days(anchor_date, offset),
                amount_cents=amounts[i],
                description=_label(order_number, i + 1, count),
            )
            for i, offset in enumerate(intent.offsets)
        ]

    if not isinstance(intent, ByCount):
        raise TypeError(f"Unsupported schedule intent: {intent!r}")

    count = intent.count
    amounts = _equal_amounts(total_cents, count)
    installments = []

    for i in range(count):
        if is_grouped:
            week_start, week_end, due_date = weekly_bucket(anchor_date, i)
            installments.append(
                Installment(
                    number=i + 1,
                    due_date=due_date,
                    amount_cents=amounts[i],
                    description=f"Weekly grouped {format_short_date(week_start)} to {format_short_date(week_end)}",
                    period_start=week_start,
                    period_end=week_end,
                )
            )
        else:
            installments.append(
                Installment(
                    number=i + 1,
                    due_date=add_days(anchor_date, MONTHLY_STEP_DAYS * (i + 1)),
                    amount_cents=amounts[i],
                    description=_label(order_number, i + 1, count),
                )
            )

    return installments


def generate_lump_sum(total: Number, anchor_date: date, order_number: Optional[str] = None) -> List[Installment]:
    """Single payment for the whole total, due on the order date"""
    label = f"Order {order_number}" if order_number else "Order"
    return [Installment(number=1, due_date=anchor_date, amount_cents=to_cents(total), description=label)]


def schedule_total(installments: List[Installment]) -> Decimal:
    """Sum of installment amounts in major units"""
    return sum((inst.amount for inst in installments), Decimal("0.00"))
