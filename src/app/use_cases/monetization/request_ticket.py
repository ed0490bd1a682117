"""RequestTicket Use Case

Starts a ticket purchase: a PENDING ticket bound to a new PENDING
EVENT_TICKET transaction, written in one commit.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.repositories.ticket_repository import TicketRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.ticket import Ticket, TicketStatus
from src.domain.transaction import RevenueSource, TransactionStatus
from . import errors
from .create_transaction import CreateTransaction
from .dtos import CreateTransactionCommandDTO, RequestTicketCommandDTO, TicketResponseDTO

logger = logging.getLogger(__name__)


class RequestTicket:
    """
    Use Case: Request a ticket for a paid event

    Business Rules:
    1. Event must exist (EVENT_NOT_FOUND)
    2. Free events need no ticket (VALIDATION_ERROR)
    3. A user holding an ACTIVE ticket for the event cannot buy another (INVALID_STATE)
    4. A PENDING ticket whose transaction is still PENDING is returned as is,
       so retrying the request does not create a second purchase
    5. A PENDING ticket whose transaction already COMPLETED is awaiting
       activation, so a new purchase is refused (INVALID_STATE)
    6. PENDING tickets whose transaction was declined are abandoned (CANCELLED)
    7. Ticket and transaction are created in the same commit

    Flow:
    1. Load event, check it is paid
    2. Inspect the user's existing tickets for the event
    3. Stage EVENT_TICKET transaction for the event price
    4. Create PENDING ticket
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ticket_repo: TicketRepository,
        transaction_repo: TransactionRepository,
        catalog: CatalogService,
        transaction_creator: CreateTransaction,
    ):
        self.uow = uow
        self.ticket_repo = ticket_repo
        self.transaction_repo = transaction_repo
        self.catalog = catalog
        self.transaction_creator = transaction_creator

    async def execute(self, command: RequestTicketCommandDTO) -> Result[TicketResponseDTO]:
        try:
            # Step 1: Event
            event = await self.catalog.get_event(command.event_id)
            if not event:
                return Return.err(
                    Error(code=errors.EVENT_NOT_FOUND, message=f"Event {command.event_id} not found")
                )

            if not event.is_paid or event.price is None or event.price <= 0:
                return Return.err(
                    errors.validation_error(
                        f"Event {command.event_id} is free, no ticket required",
                        reason="free_event",
                    )
                )

            # Step 2: Existing tickets
            existing = await self.ticket_repo.find_by_event_and_user(command.event_id, command.user_id)

            if any(t.status == TicketStatus.ACTIVE for t in existing):
                return Return.err(
                    errors.invalid_state(
                        f"User {command.user_id} already holds an active ticket for event {command.event_id}"
                    )
                )

            for ticket in existing:
                if ticket.status != TicketStatus.PENDING:
                    continue
                transaction = await self.transaction_repo.get_by_id(ticket.transaction_id)
                if transaction and transaction.status == TransactionStatus.PENDING:
                    logger.info(f"Returning open ticket request {ticket.id} for event {command.event_id}")
                    return Return.ok(TicketResponseDTO.from_entity(ticket))
                if transaction and transaction.status == TransactionStatus.COMPLETED:
                    return Return.err(
                        errors.invalid_state(
                            f"Payment for ticket {ticket.id} already completed, activation pending"
                        )
                    )
                if transaction and transaction.status == TransactionStatus.FAILED:
                    abandoned = await self.ticket_repo.compare_and_set_status(
                        ticket.id, TicketStatus.PENDING, TicketStatus.CANCELLED
                    )
                    if abandoned:
                        logger.info(f"Ticket {ticket.id} abandoned after declined payment")

            # Step 3: Transaction
            staged = await self.transaction_creator.stage(
                CreateTransactionCommandDTO(
                    amount=event.price,
                    payer_id=command.user_id,
                    artist_id=event.artist_id,
                    description=f"Ticket: {event.title or event.id}",
                    source=RevenueSource.EVENT_TICKET,
                    source_id=event.id,
                )
            )
            if staged.is_err():
                await self.uow.rollback()
                return staged
            transaction = staged.value

            # Step 4: Ticket
            ticket = await self.ticket_repo.create(
                Ticket(
                    event_id=event.id,
                    user_id=command.user_id,
                    transaction_id=transaction.id,
                    status=TicketStatus.PENDING,
                    price=event.price,
                    currency=event.currency,
                )
            )

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Ticket {ticket.id} requested: event={event.id}, user={command.user_id}, "
                f"transaction={transaction.id}, price={event.price} {event.currency}"
            )
            return Return.ok(TicketResponseDTO.from_entity(ticket))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REQUEST_TICKET_FAILED",
                    message="Failed to request ticket",
                    reason=str(e),
                )
            )
