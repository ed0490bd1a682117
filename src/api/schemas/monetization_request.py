"""Request schemas for Monetization API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from src.app.use_cases.monetization.dtos import TicketStatusTarget
from src.domain.transaction import RevenueSource


class CreateTransactionRequestSchema(BaseModel):
    """
    Request schema for creating a transaction

    Used for POST /transactions endpoint. The payer is the caller.
    """

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=6,
        description="Amount to charge (must be > 0, at most 6 decimal places)"
    )

    artist_id: Optional[str] = Field(
        default=None,
        description="Artist receiving the revenue"
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What is being paid for"
    )

    source: RevenueSource = Field(
        ...,
        description="Revenue source tag (EVENT_TICKET, MERCHANDISE, ...)"
    )

    source_id: Optional[str] = Field(
        default=None,
        description="Catalog item being paid for"
    )

    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Free-form metadata"
    )

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError("Description must not be empty")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "40.00",
                "artist_id": "artist_456",
                "description": "Tour hoodie",
                "source": "MERCHANDISE",
                "source_id": "merch_123",
                "metadata": {"size": "L"}
            }
        }


class AuthorizePaymentRequestSchema(BaseModel):
    """
    Request schema for authorizing a payment

    Used for POST /payments/authorize endpoint.
    """

    transaction_id: int = Field(
        ...,
        description="PENDING transaction to pay"
    )

    payment_method: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Payment method (e.g., 'credit_card')"
    )

    payment_details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Opaque details forwarded to the payment gateway"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "transaction_id": 42,
                "payment_method": "credit_card",
                "payment_details": {"token": "tok_visa"}
            }
        }


class RequestTicketRequestSchema(BaseModel):
    """Used for POST /tickets endpoint. The ticket holder is the caller."""

    event_id: str = Field(..., min_length=1, description="Paid event")


class UpdateTicketStatusRequestSchema(BaseModel):
    """Used for PATCH /tickets/{ticket_id} endpoint."""

    status: TicketStatusTarget = Field(
        ...,
        description="COMPLETED (activate), CANCELLED or REFUNDED"
    )
