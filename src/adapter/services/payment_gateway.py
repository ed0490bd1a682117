"""Payment Gateway Implementations

SimulatedPaymentGateway approves a configurable share of payments and is
the default. HttpPaymentGateway talks to a real provider over HTTP.
"""

import logging
import random
from typing import Optional
import httpx
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentRequest,
    PaymentAuthorization,
    PaymentGatewayError,
)
from src.domain.base import generate_uuid

logger = logging.getLogger(__name__)


class SimulatedPaymentGateway(PaymentGateway):
    """
    Payment gateway that approves with a fixed probability

    Args:
        success_rate: Probability of approval in [0, 1] (default 0.9)
        rng: Random source, injectable for deterministic tests
    """

    def __init__(self, success_rate: float = 0.9, rng: Optional[random.Random] = None):
        if not 0 <= success_rate <= 1:
            raise ValueError("success_rate must be between 0 and 1")
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    async def authorize(self, request: PaymentRequest) -> PaymentAuthorization:
        if self.rng.random() < self.success_rate:
            reference = f"sim_{generate_uuid()}"
            logger.info(
                f"Simulated payment approved for transaction {request.transaction_id} "
                f"(amount={request.amount}, method={request.method}, reference={reference})"
            )
            return PaymentAuthorization(approved=True, provider_reference=reference)

        logger.info(f"Simulated payment declined for transaction {request.transaction_id}")
        return PaymentAuthorization(approved=False, decline_reason="Simulated decline")


class HttpPaymentGateway(PaymentGateway):
    """
    Payment gateway backed by an HTTP provider

    POSTs the payment request as JSON. A 2xx answer is parsed as a
    PaymentAuthorization, a 402 is an explicit decline, everything else
    raises PaymentGatewayError so the transaction stays PENDING.
    """

    def __init__(self, url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize HTTP payment gateway

        Args:
            url: Authorization endpoint of the provider
            timeout: Request timeout in seconds
            client: Optional shared httpx client (tests pass one with a mock transport)
        """
        self.url = url
        self.timeout = timeout
        self.client = client

    async def authorize(self, request: PaymentRequest) -> PaymentAuthorization:
        payload = {
            "transaction_id": request.transaction_id,
            "amount": str(request.amount),
            "payer_id": request.payer_id,
            "method": request.method,
            "details": request.details,
        }
        headers = {"Idempotency-Key": request.idempotency_key}

        try:
            if self.client is not None:
                response = await self.client.post(self.url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Payment gateway unreachable for transaction {request.transaction_id}: {e}")
            raise PaymentGatewayError(str(e)) from e

        if response.status_code == 402:
            body = self._json(response)
            return PaymentAuthorization(
                approved=False,
                decline_reason=body.get("reason") or "Declined by provider",
            )

        if response.is_error:
            raise PaymentGatewayError(
                f"Payment gateway returned HTTP {response.status_code} "
                f"for transaction {request.transaction_id}"
            )

        body = self._json(response)
        if "approved" not in body:
            raise PaymentGatewayError("Payment gateway reply has no 'approved' field")

        return PaymentAuthorization(
            approved=bool(body["approved"]),
            provider_reference=body.get("reference"),
            decline_reason=body.get("reason"),
        )

    @staticmethod
    def _json(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise PaymentGatewayError("Payment gateway reply is not JSON") from e
        return data if isinstance(data, dict) else {}


def create_payment_gateway(
    kind: str = "simulated",
    url: Optional[str] = None,
    success_rate: float = 0.9,
    timeout: float = 10.0,
) -> PaymentGateway:
    """
    Factory function to create the configured payment gateway

    Args:
        kind: "simulated" or "http"
        url: Provider URL, required for "http"
        success_rate: Approval probability for "simulated"
        timeout: HTTP timeout for "http"
    """
    if kind == "http":
        if not url:
            raise ValueError("PAYMENT_GATEWAY_URL is required for the http gateway")
        return HttpPaymentGateway(url, timeout=timeout)

    if kind != "simulated":
        raise ValueError(f"Unknown payment gateway: {kind}")

    return SimulatedPaymentGateway(success_rate=success_rate)
