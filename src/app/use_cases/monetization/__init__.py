"""Monetization domain use cases"""
from .create_transaction import CreateTransaction
from .authorize_payment import AuthorizePayment
from .refund_transaction import RefundTransaction
from .get_transaction import GetTransaction
from .list_transactions import ListTransactions
from .apply_side_effects import ApplySideEffects
from .retry_side_effects import RetrySideEffects
from .activate_ticket import ActivateTicket
from .request_ticket import RequestTicket
from .update_ticket_status import UpdateTicketStatus
from .check_ticket_access import CheckTicketAccess
from .get_ticket import GetTicket
from .list_tickets import ListTickets
from .get_revenue_summary import GetRevenueSummary
from .get_top_payers import GetTopPayers
from .get_reward_balance import GetRewardBalance
from .dtos import (
    ActorRole,
    ActorDTO,
    CreateTransactionCommandDTO,
    AuthorizePaymentCommandDTO,
    RefundTransactionCommandDTO,
    TicketStatusTarget,
    RequestTicketCommandDTO,
    UpdateTicketStatusCommandDTO,
    PaymentDTO,
    SideEffectOutcomeDTO,
    TransactionResponseDTO,
    ListTransactionsResponseDTO,
    TicketResponseDTO,
    TicketAccessResponseDTO,
    SideEffectReportDTO,
    RetrySideEffectsResultDTO,
    RevenueSummaryDTO,
    TopPayerDTO,
    TopPayersResponseDTO,
    RewardEntryDTO,
    RewardBalanceResponseDTO,
)

__all__ = [
    "CreateTransaction",
    "AuthorizePayment",
    "RefundTransaction",
    "GetTransaction",
    "ListTransactions",
    "ApplySideEffects",
    "RetrySideEffects",
    "ActivateTicket",
    "RequestTicket",
    "UpdateTicketStatus",
    "CheckTicketAccess",
    "GetTicket",
    "ListTickets",
    "GetRevenueSummary",
    "GetTopPayers",
    "GetRewardBalance",
    "ActorRole",
    "ActorDTO",
    "CreateTransactionCommandDTO",
    "AuthorizePaymentCommandDTO",
    "RefundTransactionCommandDTO",
    "TicketStatusTarget",
    "RequestTicketCommandDTO",
    "UpdateTicketStatusCommandDTO",
    "PaymentDTO",
    "SideEffectOutcomeDTO",
    "TransactionResponseDTO",
    "ListTransactionsResponseDTO",
    "TicketResponseDTO",
    "TicketAccessResponseDTO",
    "SideEffectReportDTO",
    "RetrySideEffectsResultDTO",
    "RevenueSummaryDTO",
    "TopPayerDTO",
    "TopPayersResponseDTO",
    "RewardEntryDTO",
    "RewardBalanceResponseDTO",
]
