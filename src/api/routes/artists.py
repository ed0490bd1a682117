"""Artist revenue API Routes"""

from fastapi import APIRouter, Depends, Query, status

from src.app.use_cases.monetization.dtos import (
    ActorDTO,
    RevenueSummaryDTO,
    TopPayersResponseDTO,
)
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_actor, get_use_cases
from src.api.error import ClientError

router = APIRouter(prefix="/artists", tags=["Revenue"])


@router.get(
    "/{artist_id}/revenue",
    response_model=RevenueSummaryDTO,
    status_code=status.HTTP_200_OK,
)
async def get_revenue_summary(
    artist_id: str,
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Revenue summary over the artist's COMPLETED transactions.

    `revenue_by_month` covers the trailing 6 calendar months, oldest first,
    zero-filled.

    **Returns:**
    - 200: Summary
    - 403: Caller is not the artist or an admin
    - 404: Artist not found
    """
    result = await use_cases.get_revenue_summary().execute(artist_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{artist_id}/top-fans",
    response_model=TopPayersResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_top_fans(
    artist_id: str,
    limit: int = Query(default=10),
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    Payers ranked by total spent on the artist (ties by payer id).

    **Query parameters:**
    - `limit`: 1..100 (default 10)
    """
    result = await use_cases.get_top_payers().execute(artist_id, limit=limit, actor=actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
