"""Transaction API Routes

FastAPI routes for creating, reading and refunding transactions.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from src.api.schemas.monetization_request import CreateTransactionRequestSchema
from src.app.use_cases.monetization.dtos import (
    ActorDTO,
    CreateTransactionCommandDTO,
    ListTransactionsResponseDTO,
    RefundTransactionCommandDTO,
    TransactionResponseDTO,
)
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_actor, get_use_cases
from src.api.error import ClientError

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post(
    "",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Artist or source item not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SOURCE_NOT_FOUND",
                            "message": "Source item merch_123 not found"
                        }
                    }
                }
            }
        },
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "amount: Input should be greater than 0"
                        }
                    }
                }
            }
        }
    }
)
async def create_transaction(
    request: CreateTransactionRequestSchema,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Create a PENDING transaction paid by the caller.

    No money moves until `POST /payments/authorize`.

    **Request body:**
    - `amount` (required): Amount to charge (must be > 0, at most 6 decimal places)
    - `description` (required): What is being paid for
    - `source` (required): EVENT_TICKET, MERCHANDISE, ALBUM_SALE, TRACK_SALE,
      SUBSCRIPTION, DONATION, STREAMING or EXCLUSIVE_CONTENT
    - `artist_id` (optional): Artist receiving the revenue
    - `source_id` (optional): Catalog item (checked for events, merchandise, albums, tracks)
    - `metadata` (optional): Free-form key/value map

    **Returns:**
    - 201: Transaction created
    - 404: Artist or source item not found
    - 400: Invalid request parameters
    """
    command = CreateTransactionCommandDTO(
        amount=request.amount,
        payer_id=actor.user_id,
        artist_id=request.artist_id,
        description=request.description,
        source=request.source,
        source_id=request.source_id,
        metadata=request.metadata or {},
    )

    result = await use_cases.create_transaction().execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    payer_id: Optional[str] = Query(default=None),
    artist_id: Optional[str] = Query(default=None),
    limit: int = Query(default=20),
    offset: int = Query(default=0),
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    List transactions, newest first.

    **Query parameters:**
    - `artist_id`: Transactions paying this artist (artist owner or admin)
    - `payer_id`: Purchases of this payer (self or admin); defaults to the caller
    - `limit`: Page size, 1..100 (default 20)
    - `offset`: Rows to skip (default 0)
    """
    result = await use_cases.list_transactions().execute(
        actor, payer_id=payer_id, artist_id=artist_id, limit=limit, offset=offset
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_transaction(
    transaction_id: int,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Get a transaction with its payment.

    **Returns:**
    - 200: Transaction found
    - 403: Caller is not the payer, the artist or an admin
    - 404: Transaction not found
    """
    result = await use_cases.get_transaction().execute(transaction_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{transaction_id}/refund",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Transaction is not COMPLETED",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_STATE",
                            "message": "Transaction 42 is PENDING, only COMPLETED transactions can be refunded"
                        }
                    }
                }
            }
        }
    }
)
async def refund_transaction(
    transaction_id: int,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Refund a COMPLETED transaction.

    Revokes the ticket it paid for. Loyalty rewards already issued are kept.

    **Returns:**
    - 200: Transaction REFUNDED
    - 403: Caller is not the artist or an admin
    - 404: Transaction not found
    - 409: Transaction is not COMPLETED
    """
    command = RefundTransactionCommandDTO(transaction_id=transaction_id, actor=actor)

    result = await use_cases.refund_transaction().execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
