from .transaction_repository import SqlAlchemyTransactionRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .ticket_repository import SqlAlchemyTicketRepository
from .reward_entry_repository import SqlAlchemyRewardEntryRepository
from .side_effect_log_repository import SqlAlchemySideEffectLogRepository

__all__ = [
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyTicketRepository",
    "SqlAlchemyRewardEntryRepository",
    "SqlAlchemySideEffectLogRepository",
]
