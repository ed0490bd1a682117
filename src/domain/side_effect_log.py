"""Side Effect Log Domain Entity

Tracks each follow-up action a completed transaction owes (ticket
activation, stock decrement, reward issuance). Rows are written PENDING in
the same commit that completes the transaction, then marked APPLIED,
SKIPPED or FAILED by the coordinator. FAILED and stale PENDING rows are
picked up by the retry worker.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint
from src.domain.base import BaseModel, BigIntPK
from src.domain.transaction import RevenueSource, Transaction
from src.domain.reward_entry import DEFAULT_REWARD_RATE, compute_reward


class SideEffectType(str, Enum):
    TICKET_ACTIVATION = "TICKET_ACTIVATION"
    STOCK_DECREMENT = "STOCK_DECREMENT"
    REWARD_ISSUANCE = "REWARD_ISSUANCE"


class SideEffectStatus(str, Enum):
    PENDING = "PENDING"
    APPLIED = "APPLIED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


FINISHED_STATUSES = {SideEffectStatus.APPLIED, SideEffectStatus.SKIPPED}

# Source-specific follow-up for a completed transaction. Every RevenueSource
# needs an explicit entry (None means "no source-specific effect").
SOURCE_SIDE_EFFECTS: Dict[RevenueSource, Optional[SideEffectType]] = {
    RevenueSource.EVENT_TICKET: SideEffectType.TICKET_ACTIVATION,
    RevenueSource.MERCHANDISE: SideEffectType.STOCK_DECREMENT,
    RevenueSource.ALBUM_SALE: None,
    RevenueSource.TRACK_SALE: None,
    RevenueSource.SUBSCRIPTION: None,
    RevenueSource.DONATION: None,
    RevenueSource.STREAMING: None,
    RevenueSource.EXCLUSIVE_CONTENT: None,
}

_unmapped = set(RevenueSource) - set(SOURCE_SIDE_EFFECTS)
if _unmapped:
    raise RuntimeError(
        f"Revenue sources without a side-effect decision: {sorted(s.value for s in _unmapped)}"
    )


class SideEffectLog(BaseModel, table=True):
    """
    Side Effect Log - one row per (transaction, effect)

    Domain Rules:
    - (transaction_id, effect) is unique
    - APPLIED and SKIPPED are final
    - attempts counts executions that ended FAILED
    """

    __tablename__ = "side_effect_logs"
    __table_args__ = (
        UniqueConstraint("transaction_id", "effect", name="uq_side_effect_transaction_effect"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True),
    )

    transaction_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("transactions.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
    )

    effect: SideEffectType = Field(description="Which follow-up action")

    status: SideEffectStatus = Field(default=SideEffectStatus.PENDING, index=True)

    attempts: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
    )

    last_error: Optional[str] = Field(
        default=None,
        sa_column=Column(String(1000), nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES


def plan_side_effects(transaction: Transaction, reward_rate: Decimal = DEFAULT_REWARD_RATE) -> List[SideEffectType]:
    """
    Follow-up actions a transaction owes once COMPLETED

    The source-specific effect needs a source_id; the reward is planned
    only when it is worth at least one unit.
    """
    effects = []

    source_effect = SOURCE_SIDE_EFFECTS[transaction.source]
    if source_effect is not None and transaction.source_id:
        effects.append(source_effect)

    if compute_reward(transaction.amount, reward_rate) > 0:
        effects.append(SideEffectType.REWARD_ISSUANCE)

    return effects
