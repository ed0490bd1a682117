"""UpdateTicketStatus Use Case

Actor-driven ticket transitions: activate (COMPLETED), cancel and refund.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.repositories.ticket_repository import TicketRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.ticket import Ticket, TicketStatus
from . import errors
from .access import owns_artist
from .activate_ticket import ActivateTicket
from .dtos import (
    ActorDTO,
    RefundTransactionCommandDTO,
    TicketResponseDTO,
    TicketStatusTarget,
    UpdateTicketStatusCommandDTO,
)
from .refund_transaction import RefundTransaction

logger = logging.getLogger(__name__)


class UpdateTicketStatus:
    """
    Use Case: Change a ticket's status on behalf of an actor

    Business Rules:
    1. COMPLETED: event artist or admin; activates the ticket, which needs a
       COMPLETED transaction
    2. CANCELLED: ticket holder, event artist or admin; legal from PENDING or
       ACTIVE; money is not returned
    3. REFUNDED: event artist or admin; legal from ACTIVE only; refunds the
       owning transaction, which revokes the ticket
    4. Everyone else gets FORBIDDEN, illegal transitions INVALID_STATE
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ticket_repo: TicketRepository,
        transaction_repo: TransactionRepository,
        catalog: CatalogService,
        ticket_activator: ActivateTicket,
        refunder: RefundTransaction,
    ):
        self.uow = uow
        self.ticket_repo = ticket_repo
        self.transaction_repo = transaction_repo
        self.catalog = catalog
        self.ticket_activator = ticket_activator
        self.refunder = refunder

    async def execute(self, command: UpdateTicketStatusCommandDTO) -> Result[TicketResponseDTO]:
        """
        Execute ticket status change

        Args:
            command: UpdateTicketStatusCommandDTO with ticket_id, target_status and actor

        Returns:
            Result[TicketResponseDTO]: Updated ticket or error
        """
        try:
            ticket = await self.ticket_repo.get_by_id(command.ticket_id)
            if not ticket:
                return Return.err(
                    Error(code=errors.TICKET_NOT_FOUND, message=f"Ticket {command.ticket_id} not found")
                )

            event = await self.catalog.get_event(ticket.event_id)
            is_artist = owns_artist(event.artist_user_id if event else None, command.actor)

            if command.target_status == TicketStatusTarget.COMPLETED:
                return await self._activate(ticket, is_artist)
            if command.target_status == TicketStatusTarget.CANCELLED:
                return await self._cancel(ticket, command.actor, is_artist)
            return await self._refund(ticket, is_artist)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_TICKET_STATUS_FAILED",
                    message="Failed to update ticket status",
                    reason=str(e),
                )
            )

    async def _activate(self, ticket: Ticket, is_artist: bool) -> Result[TicketResponseDTO]:
        if not is_artist:
            return Return.err(errors.forbidden("Only the event artist or an admin can activate tickets"))

        transaction = await self.transaction_repo.get_by_id(ticket.transaction_id)
        result = await self.ticket_activator.apply(transaction)
        if result.is_err():
            await self.uow.rollback()
            return result

        await self.uow.commit()
        return Return.ok(TicketResponseDTO.from_entity(result.value))

    async def _cancel(self, ticket: Ticket, actor: ActorDTO, is_artist: bool) -> Result[TicketResponseDTO]:
        if not (is_artist or ticket.user_id == actor.user_id):
            return Return.err(errors.forbidden("Only the ticket holder, event artist or an admin can cancel"))

        if not ticket.can_transition_to(TicketStatus.CANCELLED):
            return Return.err(
                errors.invalid_state(f"Ticket {ticket.id} is {ticket.status.value} and cannot be cancelled")
            )

        ticket_id = ticket.id
        previous = ticket.status
        cancelled = await self.ticket_repo.compare_and_set_status(
            ticket_id, previous, TicketStatus.CANCELLED
        )
        if not cancelled:
            await self.uow.rollback()
            return Return.err(
                errors.invalid_state(f"Ticket {ticket_id} changed concurrently, not cancelled")
            )

        await self.uow.commit()
        ticket = await self.ticket_repo.get_by_id(ticket_id)

        logger.info(f"Ticket {ticket_id} cancelled by {actor.user_id} (no refund issued)")
        return Return.ok(TicketResponseDTO.from_entity(ticket))

    async def _refund(self, ticket: Ticket, is_artist: bool) -> Result[TicketResponseDTO]:
        if not is_artist:
            return Return.err(errors.forbidden("Only the event artist or an admin can refund tickets"))

        if ticket.status != TicketStatus.ACTIVE:
            return Return.err(
                errors.invalid_state(f"Ticket {ticket.id} is {ticket.status.value}, only ACTIVE tickets can be refunded")
            )

        ticket_id = ticket.id
        refunded = await self.refunder.execute(
            RefundTransactionCommandDTO(transaction_id=ticket.transaction_id)
        )
        if refunded.is_err():
            return refunded

        ticket = await self.ticket_repo.get_by_id(ticket_id)
        return Return.ok(TicketResponseDTO.from_entity(ticket))
