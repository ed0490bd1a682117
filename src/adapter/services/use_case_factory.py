"""Use case wiring

Builds monetization use cases over one AsyncSession so that every
repository, the catalog and the unit of work share a transaction.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories import (
    SqlAlchemyTransactionRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyTicketRepository,
    SqlAlchemyRewardEntryRepository,
    SqlAlchemySideEffectLogRepository,
)
from src.adapter.services.catalog_service import SqlAlchemyCatalogService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.use_cases.monetization import (
    CreateTransaction,
    AuthorizePayment,
    RefundTransaction,
    GetTransaction,
    ListTransactions,
    ApplySideEffects,
    RetrySideEffects,
    ActivateTicket,
    RequestTicket,
    UpdateTicketStatus,
    CheckTicketAccess,
    GetTicket,
    ListTickets,
    GetRevenueSummary,
    GetTopPayers,
    GetRewardBalance,
)
from src.domain.reward_entry import DEFAULT_REWARD_RATE


class UseCaseFactory:
    """
    Usage:
        factory = UseCaseFactory(session, payment_gateway, notification_service)
        result = await factory.authorize_payment().execute(command)
    """

    def __init__(
        self,
        session: AsyncSession,
        payment_gateway: PaymentGateway = None,
        notification_service: NotificationService = None,
        reward_rate: Decimal = DEFAULT_REWARD_RATE,
        gateway_timeout: float = 10.0,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.session = session
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service
        self.reward_rate = Decimal(reward_rate)
        self.gateway_timeout = gateway_timeout
        self.clock = clock

        self.uow = SqlAlchemyUnitOfWork(session)
        self.transaction_repo = SqlAlchemyTransactionRepository(session)
        self.payment_repo = SqlAlchemyPaymentRepository(session)
        self.ticket_repo = SqlAlchemyTicketRepository(session)
        self.reward_repo = SqlAlchemyRewardEntryRepository(session)
        self.side_effect_repo = SqlAlchemySideEffectLogRepository(session)
        self.catalog = SqlAlchemyCatalogService(session)

    # Transaction Engine

    def create_transaction(self) -> CreateTransaction:
        return CreateTransaction(self.uow, self.transaction_repo, self.catalog)

    def authorize_payment(self) -> AuthorizePayment:
        return AuthorizePayment(
            uow=self.uow,
            transaction_repo=self.transaction_repo,
            payment_repo=self.payment_repo,
            side_effect_repo=self.side_effect_repo,
            payment_gateway=self.payment_gateway,
            side_effects=self.apply_side_effects(),
            gateway_timeout=self.gateway_timeout,
            reward_rate=self.reward_rate,
        )

    def refund_transaction(self) -> RefundTransaction:
        return RefundTransaction(
            uow=self.uow,
            transaction_repo=self.transaction_repo,
            payment_repo=self.payment_repo,
            ticket_repo=self.ticket_repo,
            side_effect_repo=self.side_effect_repo,
            catalog=self.catalog,
        )

    def get_transaction(self) -> GetTransaction:
        return GetTransaction(self.transaction_repo, self.payment_repo, self.catalog)

    def list_transactions(self) -> ListTransactions:
        return ListTransactions(self.transaction_repo, self.catalog)

    # Side-Effect Coordinator

    def apply_side_effects(self) -> ApplySideEffects:
        return ApplySideEffects(
            uow=self.uow,
            transaction_repo=self.transaction_repo,
            side_effect_repo=self.side_effect_repo,
            reward_repo=self.reward_repo,
            catalog=self.catalog,
            ticket_activator=self.activate_ticket(),
            notification_service=self.notification_service,
            reward_rate=self.reward_rate,
        )

    def retry_side_effects(self, grace_seconds: int = 60, max_attempts: int = 5) -> RetrySideEffects:
        return RetrySideEffects(
            uow=self.uow,
            side_effect_repo=self.side_effect_repo,
            side_effects=self.apply_side_effects(),
            grace_seconds=grace_seconds,
            max_attempts=max_attempts,
            clock=self.clock,
        )

    # Ticket Lifecycle Manager

    def activate_ticket(self) -> ActivateTicket:
        return ActivateTicket(self.uow, self.ticket_repo, self.transaction_repo, self.catalog)

    def request_ticket(self) -> RequestTicket:
        return RequestTicket(
            uow=self.uow,
            ticket_repo=self.ticket_repo,
            transaction_repo=self.transaction_repo,
            catalog=self.catalog,
            transaction_creator=self.create_transaction(),
        )

    def update_ticket_status(self) -> UpdateTicketStatus:
        return UpdateTicketStatus(
            uow=self.uow,
            ticket_repo=self.ticket_repo,
            transaction_repo=self.transaction_repo,
            catalog=self.catalog,
            ticket_activator=self.activate_ticket(),
            refunder=self.refund_transaction(),
        )

    def check_ticket_access(self) -> CheckTicketAccess:
        return CheckTicketAccess(self.ticket_repo, self.catalog)

    def get_ticket(self) -> GetTicket:
        return GetTicket(self.ticket_repo, self.catalog)

    def list_tickets(self) -> ListTickets:
        return ListTickets(self.ticket_repo, self.catalog)

    # Revenue Aggregator and rewards

    def get_revenue_summary(self) -> GetRevenueSummary:
        return GetRevenueSummary(self.transaction_repo, self.catalog, clock=self.clock)

    def get_top_payers(self) -> GetTopPayers:
        return GetTopPayers(self.transaction_repo, self.catalog)

    def get_reward_balance(self) -> GetRewardBalance:
        return GetRewardBalance(self.reward_repo)
