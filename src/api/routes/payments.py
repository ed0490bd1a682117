"""Payment API Routes"""

from fastapi import APIRouter, Depends, Response, status

from src.api.schemas.monetization_request import AuthorizePaymentRequestSchema
from src.app.use_cases.monetization import errors
from src.app.use_cases.monetization.dtos import (
    ActorDTO,
    AuthorizePaymentCommandDTO,
    TransactionResponseDTO,
)
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_actor, get_use_cases
from src.api.error import ClientError

router = APIRouter(prefix="/payments", tags=["Payments"])

REPLAY_HEADER = "Idempotent-Replayed"


@router.post(
    "/authorize",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {
            "description": "Payment declined",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_FAILED",
                            "message": "Payment could not be completed, try again"
                        }
                    }
                }
            }
        },
        504: {
            "description": "Payment provider did not answer; transaction stays PENDING",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_TIMEOUT",
                            "message": "Payment provider did not answer, try again"
                        }
                    }
                }
            }
        }
    }
)
async def authorize_payment(
    request: AuthorizePaymentRequestSchema,
    response: Response,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Authorize payment of a PENDING transaction.

    On approval the transaction becomes COMPLETED and its side effects run
    (ticket activation, stock decrement, loyalty reward). The response lists
    the outcome of each side effect.

    A transaction that was already processed is a duplicate submission: the
    stored transaction is returned with the `Idempotent-Replayed: true` header.

    **Request body:**
    - `transaction_id` (required): Transaction to pay
    - `payment_method` (required): Payment method tag
    - `payment_details` (optional): Opaque details for the gateway

    **Returns:**
    - 200: Transaction COMPLETED (or replayed)
    - 402: Payment declined, transaction FAILED
    - 403: Caller is not the payer
    - 404: Transaction not found
    - 504: Gateway did not answer, transaction still PENDING
    """
    lookup = use_cases.get_transaction()

    # Only the payer (or an admin) pays
    found = await lookup.execute(request.transaction_id)
    if found.is_err():
        raise ClientError(found.error)
    if found.value.payer_id != actor.user_id and not actor.is_admin:
        raise ClientError(errors.forbidden("Only the payer can authorize this payment"))

    command = AuthorizePaymentCommandDTO(
        transaction_id=request.transaction_id,
        payment_method=request.payment_method,
        payment_details=request.payment_details or {},
    )

    result = await use_cases.authorize_payment().execute(command)

    if result.is_err():
        if result.error.code == errors.INVALID_STATE:
            stored = await lookup.execute(request.transaction_id)
            if stored.is_ok():
                response.headers[REPLAY_HEADER] = "true"
                return stored.value
        raise ClientError(result.error)

    return result.value
