from .base import BaseModel, generate_uuid
from .transaction import Transaction, TransactionStatus, RevenueSource
from .payment import Payment, PaymentStatus
from .ticket import Ticket, TicketStatus
from .reward_entry import RewardEntry, compute_reward
from .side_effect_log import (
    SideEffectLog,
    SideEffectType,
    SideEffectStatus,
    SOURCE_SIDE_EFFECTS,
    plan_side_effects,
)
from .catalog import Artist, Event, Merchandise, Album, Track

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Transaction",
    "TransactionStatus",
    "RevenueSource",
    "Payment",
    "PaymentStatus",
    "Ticket",
    "TicketStatus",
    "RewardEntry",
    "compute_reward",
    "SideEffectLog",
    "SideEffectType",
    "SideEffectStatus",
    "SOURCE_SIDE_EFFECTS",
    "plan_side_effects",
    "Artist",
    "Event",
    "Merchandise",
    "Album",
    "Track",
]
