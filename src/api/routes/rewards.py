"""Reward API Routes"""

from fastapi import APIRouter, Depends, Query, status

from src.app.use_cases.monetization.dtos import ActorDTO, RewardBalanceResponseDTO
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_actor, get_use_cases
from src.api.error import ClientError

router = APIRouter(prefix="/rewards", tags=["Rewards"])


@router.get(
    "",
    response_model=RewardBalanceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_reward_balance(
    limit: int = Query(default=20),
    actor: ActorDTO = Depends(get_actor),
    use_cases: UseCaseFactory = Depends(get_use_cases),
):
    """
    The caller's loyalty balance and most recent reward entries.
    """
    result = await use_cases.get_reward_balance().execute(actor.user_id, limit=limit)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
