"""Pytest fixtures for testing"""

import pytest
from datetime import date
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from settlement_gateway.api.main import create_app
from settlement_gateway.api.dependencies import get_backoffice_client
from settlement_gateway.domain.models import AccountBalance, PaymentMode, PaymentRequest


@pytest.fixture
def backoffice() -> AsyncMock:
    """Back-office client double with an open R$ 1000.00 payable"""
    client = AsyncMock()
    client.get_account.return_value = AccountBalance(
        original_amount_cents=100000,
        outstanding_amount_cents=100000,
        due_date=date(2024, 2, 1),
    )
    client.make_payment.return_value = {"success": True}
    client.create_payables.return_value = {"success": True}
    return client


@pytest.fixture
def client(backoffice: AsyncMock) -> TestClient:
    """Create FastAPI test client with the back office stubbed out"""
    app = create_app()
    app.dependency_overrides[get_backoffice_client] = lambda: backoffice
    return TestClient(app)


@pytest.fixture
def open_account() -> AccountBalance:
    """Unpaid account of 1000.00"""
    return AccountBalance(original_amount_cents=100000, outstanding_amount_cents=100000)


@pytest.fixture
def total_payment() -> PaymentRequest:
    """Total payment with date and bank account filled in"""
    return PaymentRequest(
        mode=PaymentMode.TOTAL,
        payment_date=date(2024, 2, 1),
        bank_account_ref="7",
    )
