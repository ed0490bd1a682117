"""ActivateTicket Use Case

Moves the ticket tied to a completed EVENT_TICKET transaction to ACTIVE.
Called by the side-effect coordinator after payment; safe to repeat.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.repositories.ticket_repository import TicketRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.ticket import Ticket, TicketStatus
from src.domain.transaction import Transaction, TransactionStatus
from . import errors
from .dtos import TicketResponseDTO

logger = logging.getLogger(__name__)


class ActivateTicket:
    """
    Use Case: Activate the ticket of a completed transaction

    Business Rules:
    1. The owning transaction must be COMPLETED
    2. An ACTIVE ticket is left as is (idempotent)
    3. A PENDING ticket becomes ACTIVE
    4. CANCELLED/REFUNDED tickets are never reactivated; the PENDING -> ACTIVE
       write is conditional on both statuses, so a concurrent cancel or refund wins
    5. A transaction created without RequestTicket gets its ticket here,
       priced from the event
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ticket_repo: TicketRepository,
        transaction_repo: TransactionRepository,
        catalog: CatalogService,
    ):
        self.uow = uow
        self.ticket_repo = ticket_repo
        self.transaction_repo = transaction_repo
        self.catalog = catalog

    async def execute(self, transaction_id: int) -> Result[TicketResponseDTO]:
        try:
            transaction = await self.transaction_repo.get_by_id(transaction_id)
            if not transaction:
                return Return.err(
                    Error(
                        code=errors.TRANSACTION_NOT_FOUND,
                        message=f"Transaction {transaction_id} not found",
                    )
                )

            result = await self.apply(transaction)
            if result.is_err():
                return result

            await self.uow.commit()
            return Return.ok(TicketResponseDTO.from_entity(result.value))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ACTIVATE_TICKET_FAILED",
                    message="Failed to activate ticket",
                    reason=str(e),
                )
            )

    async def apply(self, transaction: Transaction) -> Result[Ticket]:
        """
        Activate without committing

        Args:
            transaction: Freshly loaded EVENT_TICKET transaction

        Returns:
            Result[Ticket]: The ACTIVE ticket, or INVALID_STATE
        """
        if transaction.status != TransactionStatus.COMPLETED:
            return Return.err(
                errors.invalid_state(
                    f"Transaction {transaction.id} is {transaction.status.value}, ticket cannot be activated"
                )
            )

        transaction_id = transaction.id
        ticket = await self.ticket_repo.get_by_transaction_id(transaction_id)

        if ticket is None:
            return await self._issue_active_ticket(transaction)

        if ticket.status == TicketStatus.ACTIVE:
            return Return.ok(ticket)

        if not ticket.can_transition_to(TicketStatus.ACTIVE):
            return Return.err(
                errors.invalid_state(
                    f"Ticket {ticket.id} is {ticket.status.value} and cannot be activated"
                )
            )

        return await self._activate(ticket.id, transaction_id)

    async def _activate(self, ticket_id: int, transaction_id: int) -> Result[Ticket]:
        # Holds only while the ticket is still PENDING and the transaction still COMPLETED
        activated = await self.ticket_repo.compare_and_set_status(
            ticket_id,
            TicketStatus.PENDING,
            TicketStatus.ACTIVE,
            require_completed_transaction=True,
        )
        ticket = await self.ticket_repo.get_by_id(ticket_id)

        if activated or ticket.status == TicketStatus.ACTIVE:
            logger.info(f"Ticket {ticket_id} activated for transaction {transaction_id}")
            return Return.ok(ticket)

        logger.warning(
            f"Ticket {ticket_id} changed concurrently to {ticket.status.value}, not activated"
        )
        return Return.err(
            errors.invalid_state(
                f"Ticket {ticket_id} is {ticket.status.value} and cannot be activated"
            )
        )

    async def _issue_active_ticket(self, transaction: Transaction) -> Result[Ticket]:
        event = await self.catalog.get_event(transaction.source_id)

        price = transaction.amount
        currency = "USD"
        if event:
            if event.price is not None:
                price = event.price
            currency = event.currency

        transaction_id = transaction.id
        ticket = await self.ticket_repo.create(
            Ticket(
                event_id=transaction.source_id,
                user_id=transaction.payer_id,
                transaction_id=transaction_id,
                status=TicketStatus.PENDING,
                price=price,
                currency=currency,
            )
        )
        ticket_id = ticket.id
        logger.info(
            f"Ticket {ticket_id} issued for event {ticket.event_id}, "
            f"user {ticket.user_id} (transaction {transaction_id})"
        )

        result = await self._activate(ticket_id, transaction_id)
        if result.is_err():
            # Only a refund takes a COMPLETED transaction away
            await self.ticket_repo.compare_and_set_status(
                ticket_id, TicketStatus.PENDING, TicketStatus.REFUNDED
            )
        return result
