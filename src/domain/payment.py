"""Payment Domain Entity

Records how a completed transaction was paid. Exists only for
transactions that reached COMPLETED.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, ForeignKey, JSON, String
from src.domain.base import BaseModel, BigIntPK


class PaymentStatus(str, Enum):
    COMPLETED = "COMPLETED"


class Payment(BaseModel, table=True):
    """
    Payment - one-to-one with a COMPLETED transaction

    Domain Rules:
    - transaction_id is unique
    - Created in the same commit as the COMPLETED transition
    - details are opaque provider data
    """

    __tablename__ = "payments"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
    )

    transaction_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("transactions.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        description="Owning transaction"
    )

    method: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Payment method tag (e.g., 'credit_card', 'pix')"
    )

    details: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Opaque provider details"
    )

    status: PaymentStatus = Field(default=PaymentStatus.COMPLETED)

    provider_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Gateway authorization reference"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
