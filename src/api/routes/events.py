"""Event access API Routes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from src.app.use_cases.monetization import errors
from src.app.use_cases.monetization.dtos import ActorDTO, TicketAccessResponseDTO
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_actor, get_use_cases
from src.api.error import ClientError

router = APIRouter(prefix="/events", tags=["Events"])


@router.get(
    "/{event_id}/access",
    response_model=TicketAccessResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def check_access(
    event_id: str,
    user_id: Optional[str] = Query(default=None),
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Whether a user may see the event's paid content.

    True for free events, or when the user holds an ACTIVE ticket.
    `user_id` defaults to the caller; checking someone else needs admin.
    """
    user_id = user_id or actor.user_id
    if user_id != actor.user_id and not actor.is_admin:
        raise ClientError(errors.forbidden())

    result = await use_cases.check_ticket_access().execute(event_id, user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
