"""Ticket API Routes"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from src.api.schemas.monetization_request import (
    RequestTicketRequestSchema,
    UpdateTicketStatusRequestSchema,
)
from src.app.use_cases.monetization.dtos import (
    ActorDTO,
    RequestTicketCommandDTO,
    TicketResponseDTO,
    UpdateTicketStatusCommandDTO,
)
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_actor, get_use_cases
from src.api.error import ClientError

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post(
    "",
    response_model=TicketResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Free event",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Event event_789 is free, no ticket required"
                        }
                    }
                }
            }
        },
        409: {
            "description": "Caller already holds an active ticket",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_STATE",
                            "message": "User user_123 already holds an active ticket for event event_789"
                        }
                    }
                }
            }
        }
    }
)
async def request_ticket(
    request: RequestTicketRequestSchema,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Request a ticket for a paid event.

    Creates a PENDING ticket and the PENDING transaction paying for it. Pay
    with `POST /payments/authorize` using the returned `transaction_id`; the
    ticket becomes ACTIVE once the payment is approved.

    **Returns:**
    - 201: Ticket requested (or the caller's open request for the event)
    - 400: Event is free
    - 404: Event not found
    - 409: Caller already holds an ACTIVE ticket
    """
    command = RequestTicketCommandDTO(event_id=request.event_id, user_id=actor.user_id)

    result = await use_cases.request_ticket().execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=List[TicketResponseDTO],
    status_code=status.HTTP_200_OK,
)
async def list_tickets(
    event_id: Optional[str] = Query(default=None),
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    List tickets.

    Without `event_id` the caller's tickets. With `event_id` every ticket of
    the event for its artist and admins, the caller's own otherwise.
    """
    result = await use_cases.list_tickets().execute(actor, event_id=event_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{ticket_id}",
    response_model=TicketResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_ticket(
    ticket_id: int,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    result = await use_cases.get_ticket().execute(ticket_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{ticket_id}",
    response_model=TicketResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def update_ticket_status(
    ticket_id: int,
    request: UpdateTicketStatusRequestSchema,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Change a ticket's status.

    **Request body:**
    - `status`: COMPLETED (activate; event artist or admin),
      CANCELLED (holder, event artist or admin; no refund),
      REFUNDED (event artist or admin; refunds the transaction)

    **Returns:**
    - 200: Ticket updated
    - 403: Caller may not make this change
    - 404: Ticket not found
    - 409: Transition not legal from the ticket's status
    """
    command = UpdateTicketStatusCommandDTO(
        ticket_id=ticket_id,
        target_status=request.status,
        actor=actor,
    )

    result = await use_cases.update_ticket_status().execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
