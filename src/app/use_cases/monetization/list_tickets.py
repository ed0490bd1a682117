"""
List Tickets Use Case

Lists tickets of the caller, or of an event for its artist.
"""
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.ticket_repository import TicketRepository
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, TicketResponseDTO


class ListTickets:
    """
    Use case: List tickets

    Business Rules:
    1. With event_id: the event artist and admins see every ticket of the
       event, anybody else only their own
    2. Without event_id: the caller's tickets
    """

    def __init__(self, ticket_repo: TicketRepository, catalog: CatalogService):
        self.ticket_repo = ticket_repo
        self.catalog = catalog

    async def execute(
        self, actor: ActorDTO, event_id: Optional[str] = None
    ) -> Result[List[TicketResponseDTO]]:
        if event_id is None:
            tickets = await self.ticket_repo.list_by_user(actor.user_id)
            return Return.ok([TicketResponseDTO.from_entity(t) for t in tickets])

        event = await self.catalog.get_event(event_id)
        if not event:
            return Return.err(Error(code=errors.EVENT_NOT_FOUND, message=f"Event {event_id} not found"))

        if owns_artist(event.artist_user_id, actor):
            tickets = await self.ticket_repo.list_by_event(event_id)
        else:
            tickets = await self.ticket_repo.find_by_event_and_user(event_id, actor.user_id)

        return Return.ok([TicketResponseDTO.from_entity(t) for t in tickets])
