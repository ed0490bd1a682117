"""
Check Ticket Access Use Case

Answers whether a user may see an event's paid content.
"""
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.ticket_repository import TicketRepository
from src.domain.ticket import TicketStatus
from . import errors
from .dtos import TicketAccessResponseDTO


class CheckTicketAccess:
    """
    Use case: Check access to an event

    Free events are open to everyone; paid events need an ACTIVE ticket.
    """

    def __init__(self, ticket_repo: TicketRepository, catalog: CatalogService):
        self.ticket_repo = ticket_repo
        self.catalog = catalog

    async def execute(self, event_id: str, user_id: str) -> Result[TicketAccessResponseDTO]:
        event = await self.catalog.get_event(event_id)
        if not event:
            return Return.err(Error(code=errors.EVENT_NOT_FOUND, message=f"Event {event_id} not found"))

        if not event.is_paid:
            return Return.ok(
                TicketAccessResponseDTO(event_id=event_id, user_id=user_id, has_access=True, reason="free_event")
            )

        active = await self.ticket_repo.find_by_event_and_user(event_id, user_id, status=TicketStatus.ACTIVE)
        return Return.ok(
            TicketAccessResponseDTO(
                event_id=event_id,
                user_id=user_id,
                has_access=bool(active),
                reason="active_ticket" if active else "no_active_ticket",
            )
        )
