"""Ticket Domain Entity

Access grant to a paid event, bound one-to-one to an EVENT_TICKET
transaction. Price and currency are copied at issuance so later price
changes on the event don't touch sold tickets.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Numeric, String
from src.domain.base import BaseModel, BigIntPK


class TicketStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


ALLOWED_TICKET_TRANSITIONS = {
    TicketStatus.PENDING: {TicketStatus.ACTIVE, TicketStatus.CANCELLED, TicketStatus.REFUNDED},
    TicketStatus.ACTIVE: {TicketStatus.CANCELLED, TicketStatus.REFUNDED},
    TicketStatus.CANCELLED: set(),
    TicketStatus.REFUNDED: set(),
}


class Ticket(BaseModel, table=True):
    """
    Ticket - event access grant

    Domain Rules:
    - transaction_id is unique (one ticket per transaction)
    - ACTIVE requires the owning transaction to be COMPLETED
    - CANCELLED and REFUNDED are terminal
    """

    __tablename__ = "tickets"
    __table_args__ = (
        Index('ix_tickets_event_user', 'event_id', 'user_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
    )

    event_id: str = Field(index=True, description="Event the ticket grants access to")

    user_id: str = Field(index=True, description="Ticket holder")

    transaction_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("transactions.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
    )

    status: TicketStatus = Field(default=TicketStatus.PENDING)

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Price at issuance"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217) at issuance"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def can_transition_to(self, new_status: TicketStatus) -> bool:
        return new_status in ALLOWED_TICKET_TRANSITIONS[self.status]
