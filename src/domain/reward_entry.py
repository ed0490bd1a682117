"""Reward Entry Domain Entity

Loyalty-currency credit issued as a side effect of a completed
transaction. At most one entry exists per transaction.
"""

from datetime import datetime
from decimal import Decimal, ROUND_FLOOR
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, String
from src.domain.base import BaseModel, BigIntPK


class RewardEntry(BaseModel, table=True):
    __tablename__ = "reward_entries"
    __table_args__ = (
        CheckConstraint('amount >= 0', name='reward_amount_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
    )

    user_id: str = Field(index=True, description="Reward recipient")

    amount: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Loyalty-currency units"
    )

    description: str = Field(sa_column=Column(String(500), nullable=False))

    transaction_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("transactions.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        description="Originating transaction (unique, prevents double-crediting)"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)


DEFAULT_REWARD_RATE = Decimal("0.05")


def compute_reward(amount: Decimal, rate: Decimal = DEFAULT_REWARD_RATE) -> int:
    """Loyalty units earned by a purchase: floor(amount * rate)"""
    return int((Decimal(amount) * rate).to_integral_value(rounding=ROUND_FLOOR))
