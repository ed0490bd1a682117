"""
Get Ticket Use Case
"""
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.ticket_repository import TicketRepository
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, TicketResponseDTO


class GetTicket:
    """
    Use case: View a ticket

    Readable by its holder, the event's artist and admins.
    """

    def __init__(self, ticket_repo: TicketRepository, catalog: CatalogService):
        self.ticket_repo = ticket_repo
        self.catalog = catalog

    async def execute(self, ticket_id: int, actor: ActorDTO) -> Result[TicketResponseDTO]:
        ticket = await self.ticket_repo.get_by_id(ticket_id)
        if not ticket:
            return Return.err(Error(code=errors.TICKET_NOT_FOUND, message=f"Ticket {ticket_id} not found"))

        if ticket.user_id != actor.user_id:
            event = await self.catalog.get_event(ticket.event_id)
            if not owns_artist(event.artist_user_id if event else None, actor):
                return Return.err(errors.forbidden())

        return Return.ok(TicketResponseDTO.from_entity(ticket))
