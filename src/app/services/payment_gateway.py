"""Payment Gateway Interface

The only contract the transaction state machine has with the payment
provider. Implementations either approve or decline; anything else
(timeouts, transport errors) is raised and leaves the transaction PENDING.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class PaymentRequest(BaseModel):
    transaction_id: int
    amount: Decimal
    payer_id: str
    method: str
    details: Dict[str, Any] = Field(default_factory=dict)
    idempotency_key: str


class PaymentAuthorization(BaseModel):
    approved: bool
    provider_reference: Optional[str] = None
    decline_reason: Optional[str] = None


class PaymentGatewayError(Exception):
    """Gateway could not give an answer (unreachable, malformed reply)"""


class PaymentGateway(ABC):

    @abstractmethod
    async def authorize(self, request: PaymentRequest) -> PaymentAuthorization:
        """
        Authorize a payment

        Args:
            request: Amount, method and opaque details; idempotency_key is
                     stable per transaction so retries are safe upstream

        Returns:
            PaymentAuthorization with approved=True or a decline reason

        Raises:
            PaymentGatewayError: When no decision could be obtained
        """
        pass
