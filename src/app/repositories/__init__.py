from .transaction_repository import TransactionRepository, PayerTotal
from .payment_repository import PaymentRepository
from .ticket_repository import TicketRepository
from .reward_entry_repository import RewardEntryRepository
from .side_effect_log_repository import SideEffectLogRepository

__all__ = [
    "TransactionRepository",
    "PayerTotal",
    "PaymentRepository",
    "TicketRepository",
    "RewardEntryRepository",
    "SideEffectLogRepository",
]
