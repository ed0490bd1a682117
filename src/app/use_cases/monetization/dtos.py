"""Data Transfer Objects for Monetization Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.transaction import RevenueSource, Transaction
from src.domain.payment import Payment
from src.domain.ticket import Ticket
from src.domain.reward_entry import RewardEntry
from src.domain.side_effect_log import SideEffectType, SideEffectStatus


class ActorRole(str, Enum):
    USER = "USER"
    ARTIST = "ARTIST"
    ADMIN = "ADMIN"


class ActorDTO(BaseModel):
    """Caller identity as provided by the identity layer"""

    user_id: str = Field(..., min_length=1)
    role: ActorRole = ActorRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN


class CreateTransactionCommandDTO(BaseModel):
    """
    Command DTO for creating a PENDING transaction

    Used as input to CreateTransaction use case.
    """

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=6,
        description="Amount to charge (must be > 0, at most 6 decimal places)"
    )

    payer_id: str = Field(
        ...,
        min_length=1,
        description="User paying"
    )

    artist_id: Optional[str] = Field(
        default=None,
        description="Artist receiving the revenue"
    )

    description: str = Field(
        ...,
        description="Human readable description (non-empty)"
    )

    source: RevenueSource = Field(
        ...,
        description="Revenue source tag"
    )

    source_id: Optional[str] = Field(
        default=None,
        description="Catalog item being paid for"
    )

    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form metadata"
    )

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if not v or not v.strip():
            raise ValueError("Description must not be empty")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "100.00",
                "payer_id": "user_123",
                "artist_id": "artist_456",
                "description": "Ticket: Live at the Roof",
                "source": "EVENT_TICKET",
                "source_id": "event_789",
                "metadata": {"seat": "general"}
            }
        }


class AuthorizePaymentCommandDTO(BaseModel):
    """
    Command DTO for authorizing payment of a PENDING transaction

    Used as input to AuthorizePayment use case.
    """

    transaction_id: int = Field(..., description="Transaction to pay")

    payment_method: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Payment method tag (e.g., 'credit_card')"
    )

    payment_details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque gateway details"
    )


class RefundTransactionCommandDTO(BaseModel):
    """
    Command DTO for refunding a COMPLETED transaction

    actor is None for internal callers that already checked permissions.
    """

    transaction_id: int
    actor: Optional[ActorDTO] = None


class TicketStatusTarget(str, Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class RequestTicketCommandDTO(BaseModel):
    event_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class UpdateTicketStatusCommandDTO(BaseModel):
    ticket_id: int
    target_status: TicketStatusTarget
    actor: ActorDTO


class PaymentDTO(BaseModel):
    method: str
    status: str
    provider_reference: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentDTO":
        return cls(
            method=payment.method,
            status=payment.status.value,
            provider_reference=payment.provider_reference,
            details=payment.details or {},
            created_at=payment.created_at,
        )


class SideEffectOutcomeDTO(BaseModel):
    effect: SideEffectType
    status: SideEffectStatus
    detail: Optional[str] = None


class TransactionResponseDTO(BaseModel):
    """
    Response DTO for transaction operations

    Returned by CreateTransaction, AuthorizePayment, RefundTransaction, etc.
    """

    transaction_id: int
    amount: Decimal
    payer_id: str
    artist_id: Optional[str] = None
    description: str
    source: RevenueSource
    source_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    status: str
    created_at: datetime
    updated_at: datetime
    payment: Optional[PaymentDTO] = None
    side_effects: List[SideEffectOutcomeDTO] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls,
        transaction: Transaction,
        payment: Optional[Payment] = None,
        side_effects: Optional[List[SideEffectOutcomeDTO]] = None,
    ) -> "TransactionResponseDTO":
        return cls(
            transaction_id=transaction.id,
            amount=transaction.amount,
            payer_id=transaction.payer_id,
            artist_id=transaction.artist_id,
            description=transaction.description,
            source=transaction.source,
            source_id=transaction.source_id,
            metadata=transaction.extra_data or {},
            status=transaction.status.value,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
            payment=PaymentDTO.from_entity(payment) if payment else None,
            side_effects=side_effects or [],
        )


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionResponseDTO]
    total: int
    limit: int
    offset: int


class TicketResponseDTO(BaseModel):
    ticket_id: int
    event_id: str
    user_id: str
    transaction_id: int
    status: str
    price: Decimal
    currency: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, ticket: Ticket) -> "TicketResponseDTO":
        return cls(
            ticket_id=ticket.id,
            event_id=ticket.event_id,
            user_id=ticket.user_id,
            transaction_id=ticket.transaction_id,
            status=ticket.status.value,
            price=ticket.price,
            currency=ticket.currency,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )


class TicketAccessResponseDTO(BaseModel):
    event_id: str
    user_id: str
    has_access: bool
    reason: str


class SideEffectReportDTO(BaseModel):
    transaction_id: int
    outcomes: List[SideEffectOutcomeDTO]

    @property
    def has_failures(self) -> bool:
        return any(o.status == SideEffectStatus.FAILED for o in self.outcomes)


class RetrySideEffectsResultDTO(BaseModel):
    transactions_checked: int
    effects_applied: int
    effects_skipped: int
    effects_failed: int
    run_time: datetime
    execution_time_ms: int


class RevenueSummaryDTO(BaseModel):
    """
    Response DTO for an artist's revenue summary

    revenue_by_month covers the 6 trailing calendar months, oldest first.
    """

    artist_id: str
    total_revenue: Decimal
    revenue_by_source: Dict[str, Decimal]
    revenue_by_month: Dict[str, Decimal]
    transaction_count: int

    class Config:
        json_schema_extra = {
            "example": {
                "artist_id": "artist_456",
                "total_revenue": "140.00",
                "revenue_by_source": {"EVENT_TICKET": "100.00", "MERCHANDISE": "40.00"},
                "revenue_by_month": {
                    "2024-01": "0", "2024-02": "40.00", "2024-03": "0",
                    "2024-04": "0", "2024-05": "100.00", "2024-06": "0"
                },
                "transaction_count": 2
            }
        }


class TopPayerDTO(BaseModel):
    payer_id: str
    total_spent: Decimal
    transaction_count: int


class TopPayersResponseDTO(BaseModel):
    artist_id: str
    payers: List[TopPayerDTO]


class RewardEntryDTO(BaseModel):
    reward_id: int
    amount: int
    description: str
    transaction_id: int
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: RewardEntry) -> "RewardEntryDTO":
        return cls(
            reward_id=entry.id,
            amount=entry.amount,
            description=entry.description,
            transaction_id=entry.transaction_id,
            created_at=entry.created_at,
        )


class RewardBalanceResponseDTO(BaseModel):
    user_id: str
    balance: int
    entries: List[RewardEntryDTO]
