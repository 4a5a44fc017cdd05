"""End-to-end scenarios: installment text -> schedule -> submission -> payments"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from settlement_gateway.domain.intent_parser import parse_installment_spec
from settlement_gateway.domain.models import AccountBalance, ByCount, ByOffsets
from settlement_gateway.domain.schedule import generate_schedule


def test_monthly_order_three_installments():
    """1000.00 on 2024-01-01 in "3x": 30-day steps, last installment absorbs the cent"""
    intent = parse_installment_spec("3x", is_grouped=False)
    assert intent == ByCount(3)

    installments = generate_schedule(Decimal("1000.00"), date(2024, 1, 1), intent, is_grouped=False)

    assert [inst.amount for inst in installments] == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
    assert [inst.due_date for inst in installments] == [date(2024, 1, 31), date(2024, 3, 1), date(2024, 3, 31)]
    assert sum(inst.amount for inst in installments) == Decimal("1000.00")


def test_grouped_order_weekly_buckets():
    """600.00 placed Wednesday 2024-03-06 in "2x": due the Fridays after each bucket closes"""
    intent = parse_installment_spec("2x", is_grouped=True)
    installments = generate_schedule(Decimal("600.00"), date(2024, 3, 6), intent, is_grouped=True)

    assert installments[0].period_start == date(2024, 3, 4)
    assert [inst.due_date for inst in installments] == [date(2024, 3, 15), date(2024, 3, 22)]
    assert [inst.amount for inst in installments] == [Decimal("300.00"), Decimal("300.00")]


def test_offsets_order():
    """150.00 on 2024-05-01 in "30/60/90" """
    intent = parse_installment_spec("30/60/90", is_grouped=False)
    assert intent == ByOffsets((30, 60, 90))

    installments = generate_schedule(Decimal("150.00"), date(2024, 5, 1), intent, is_grouped=False)

    assert [inst.due_date for inst in installments] == [date(2024, 5, 31), date(2024, 6, 30), date(2024, 7, 30)]
    assert [inst.amount for inst in installments] == [Decimal("50.00")] * 3


def test_preview_edit_submit_and_pay(client: TestClient, backoffice: AsyncMock):
    """Preview a schedule, hand-edit it, submit it, then pay the first installment in two steps"""
    preview = client.post(
        "/v1/schedules/preview",
        json={"total": "1000.00", "anchor_date": "2024-01-01", "spec": "30,60", "order_number": "PED-9"},
    ).json()
    assert [inst["amount"] for inst in preview["installments"]] == ["500.00", "500.00"]

    submitted = client.post(
        "/v1/orders/9/payables",
        json={
            "total": "1000.00",
            "installments": preview["installments"],
            "overrides": [{"number": 1, "amount": "400.00"}, {"number": 2, "amount": "600.00"}],
        },
    )
    assert submitted.status_code == 200
    _, _, installments = backoffice.create_payables.call_args.args
    assert [inst.amount_cents for inst in installments] == [40000, 60000]

    backoffice.get_account.return_value = AccountBalance(original_amount_cents=40000, outstanding_amount_cents=40000)
    first = client.post(
        "/v1/accounts/91/payments",
        json={"mode": "partial", "explicit_amount": "150.00", "payment_date": "2024-01-31", "bank_account_ref": "1"},
    )
    assert first.json() == {"applied_amount": "150.00", "new_outstanding": "250.00", "became_settled": False}

    backoffice.get_account.return_value = AccountBalance(original_amount_cents=40000, outstanding_amount_cents=25000)
    second = client.post(
        "/v1/accounts/91/payments",
        json={"mode": "partial", "explicit_amount": "250.00", "payment_date": "2024-02-05", "bank_account_ref": "1"},
    )
    assert second.json() == {"applied_amount": "250.00", "new_outstanding": "0.00", "became_settled": True}
