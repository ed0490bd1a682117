"""Transaction Domain Entity

Canonical record of a fan's intent to pay an artist (or the platform).
A transaction is created PENDING and only moves forward through the
authorization and refund steps; it is never deleted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, JSON, Numeric, String
from src.domain.base import BaseModel, BigIntPK


class RevenueSource(str, Enum):
    """What the money is paying for"""
    EVENT_TICKET = "EVENT_TICKET"
    MERCHANDISE = "MERCHANDISE"
    ALBUM_SALE = "ALBUM_SALE"
    TRACK_SALE = "TRACK_SALE"
    SUBSCRIPTION = "SUBSCRIPTION"
    DONATION = "DONATION"
    STREAMING = "STREAMING"
    EXCLUSIVE_CONTENT = "EXCLUSIVE_CONTENT"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


ALLOWED_TRANSITIONS = {
    TransactionStatus.PENDING: {TransactionStatus.COMPLETED, TransactionStatus.FAILED},
    TransactionStatus.COMPLETED: {TransactionStatus.REFUNDED},
    TransactionStatus.FAILED: set(),
    TransactionStatus.REFUNDED: set(),
}


class Transaction(BaseModel, table=True):
    """
    Transaction - intent to move money

    Domain Rules:
    - amount must be positive
    - Status transitions: PENDING -> COMPLETED | FAILED, COMPLETED -> REFUNDED
    - FAILED and REFUNDED are terminal
    - Every status change is a conditional update on the current status
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint('amount > 0', name='transaction_amount_positive'),
        Index('ix_transactions_artist_status', 'artist_id', 'status'),
        Index('ix_transactions_created_at', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Amount charged (precision: 18,6)"
    )

    payer_id: str = Field(
        index=True,
        description="User paying for the item"
    )

    artist_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Artist receiving the revenue, if any"
    )

    description: str = Field(
        sa_column=Column(String(500), nullable=False),
        description="Human readable description"
    )

    source: RevenueSource = Field(
        description="Revenue source tag"
    )

    source_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Catalog item being paid for (event, merchandise, album, track)"
    )

    extra_data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Free-form metadata, no assumed schema"
    )

    status: TransactionStatus = Field(
        default=TransactionStatus.PENDING,
        description="Lifecycle status"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last status change"
    )

    def can_transition_to(self, new_status: TransactionStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]
