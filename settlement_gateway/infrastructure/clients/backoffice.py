"""Back-office API HTTP client for accounts and payable schedules"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List

import httpx

from settlement_gateway.config import settings
from settlement_gateway.domain.exceptions import (
    ResourceNotFoundError,
    BackofficeAPIError,
    InvalidBackofficeDataError,
)
from settlement_gateway.domain.models import (
    AccountBalance,
    Installment,
    PaymentMode,
    PaymentRequest,
    PaymentType,
    ReconciliationResult,
)
from settlement_gateway.domain.money import from_cents, to_cents
from settlement_gateway.infrastructure.observability.metrics import (
    backoffice_failure_counter,
    backoffice_latency_histogram,
)

logger = logging.getLogger(__name__)

ACCOUNT_PATHS = {
    "payable": ("accounts-payable", "make-payment"),
    "receivable": ("accounts-receivable", "receive-payment"),
}

PAYMENT_WIRE_KEYS = {
    "payable": ("payment_type", "valor_pago"),
    "receivable": ("receipt_type", "valor_recebido"),
}

PAYMENT_TYPE_LABELS = {
    PaymentType.LUMP_SUM: "À Vista",
    PaymentType.INSTALLMENTS: "Parcelado",
}


def parse_account(data: Dict[str, Any]) -> AccountBalance:
    """
    Build an AccountBalance from a back-office account payload.

    Accounts without an explicit outstanding amount are fully open, or fully
    settled when flagged as paid.
    """
    try:
        account = data.get("account", data)
        original_cents = abs(to_cents(account["amount"]))
        is_paid = bool(account.get("is_paid", False))
        if account.get("outstanding_amount") is not None:
            outstanding_cents = abs(to_cents(account["outstanding_amount"]))
        else:
            outstanding_cents = 0 if is_paid else original_cents
        due_date = date.fromisoformat(account["due_date"]) if account.get("due_date") else None
    except (AttributeError, KeyError, ValueError, TypeError, ArithmeticError) as e:
        raise InvalidBackofficeDataError(f"Invalid account data from back office: {e}") from e

    return AccountBalance(
        original_amount_cents=original_cents,
        outstanding_amount_cents=outstanding_cents,
        due_date=due_date,
        is_paid=is_paid,
    )


class BackofficeClient:
    """Client for the external back-office REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.backoffice_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.token = token or settings.backoffice_api_token
        self.max_retries = settings.backoffice_max_retries
        self.backoff_base = settings.backoffice_backoff_base
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=headers,
            transport=self.transport,
        )

    async def get_account(self, account_id: str, kind: str = "payable") -> AccountBalance:
        """
        Fetch the current balance of a payable/receivable.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base...
        - Retries on 5xx errors and network failures, never on 4xx

        Raises:
            ResourceNotFoundError: Account does not exist
            BackofficeAPIError: On timeout or HTTP errors after retries
            InvalidBackofficeDataError: On a malformed payload
        """
        collection, _ = ACCOUNT_PATHS[kind]
        attempt = 0
        async with self._client() as client:
            while True:
                try:
                    with backoffice_latency_histogram.labels(operation="get_account").time():
                        response = await client.get(f"/{collection}/{account_id}")
                    if response.status_code == 404:
                        raise ResourceNotFoundError(f"{kind.capitalize()} account {account_id} not found")
                    response.raise_for_status()
                    try:
                        data = response.json()
                    except ValueError as e:
                        raise InvalidBackofficeDataError(f"Invalid account data from back office: {e}") from e
                    return parse_account(data)

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    backoffice_failure_counter.labels(operation="get_account").inc()
                    retryable = not isinstance(e, httpx.HTTPStatusError) or e.response.status_code >= 500
                    attempt += 1

                    if not retryable or attempt >= self.max_retries:
                        raise BackofficeAPIError(f"Back-office account fetch failed: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    logger.warning("Retrying account fetch in %ss (attempt %s)", backoff, attempt)
                    await asyncio.sleep(backoff)

    async def create_payables(
        self,
        order_id: str,
        payment_type: PaymentType,
        installments: List[Installment],
    ) -> Dict[str, Any]:
        """
        Persist a finalized schedule against an order.

        Lump-sum orders send an empty installment list; the back office dates
        the single payable on the order date.
        """
        payload = {
            "payment_type": PAYMENT_TYPE_LABELS[payment_type],
            "installments": [
                {
                    "number": inst.number,
                    "amount": float(inst.amount),
                    "due_date": inst.due_date.isoformat() if inst.due_date else None,
                }
                for inst in installments
            ]
            if payment_type == PaymentType.INSTALLMENTS
            else [],
        }
        return await self._post("create_payables", f"/orders/{order_id}/create-payables-advanced", payload)

    async def make_payment(
        self,
        account_id: str,
        request: PaymentRequest,
        result: ReconciliationResult,
        kind: str = "payable",
    ) -> Dict[str, Any]:
        """Forward a reconciled payment to the back office"""
        collection, action = ACCOUNT_PATHS[kind]
        type_key, amount_key = PAYMENT_WIRE_KEYS[kind]
        payload = {
            "bank_account_id": request.bank_account_ref,
            type_key: "total" if request.mode == PaymentMode.TOTAL else "parcial",
            "juros": float(from_cents(request.interest_cents)),
            "desconto": float(from_cents(request.discount_cents)),
            amount_key: float(result.applied_amount),
            "payment_date": request.payment_date.isoformat() if request.payment_date else None,
        }
        return await self._post("make_payment", f"/{collection}/{account_id}/{action}", payload)

    async def _post(self, operation: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        # Writes are not retried: the back office has no idempotency keys
        async with self._client() as client:
            try:
                with backoffice_latency_histogram.labels(operation=operation).time():
                    response = await client.post(path, json=payload)
                if response.status_code == 404:
                    raise ResourceNotFoundError(f"Back-office resource not found: {path}")
                response.raise_for_status()
                return response.json() if response.content else {}

            except httpx.TimeoutException as e:
                backoffice_failure_counter.labels(operation=operation).inc()
                raise BackofficeAPIError(f"Back-office timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                backoffice_failure_counter.labels(operation=operation).inc()
                raise BackofficeAPIError(
                    f"Back-office error {e.response.status_code}: {_error_detail(e.response)}"
                ) from e
            except httpx.RequestError as e:
                backoffice_failure_counter.labels(operation=operation).inc()
                raise BackofficeAPIError(f"Back-office unreachable: {e}") from e
            except ValueError as e:
                raise InvalidBackofficeDataError(f"Invalid response from back office: {e}") from e


def _error_detail(response: httpx.Response) -> str:
    try:
        return response.json().get("error", response.text)
    except (ValueError, AttributeError):
        return response.text
