"""Get Reward Balance Use Case

Retrieves a user's loyalty balance and recent reward entries.
"""

from libs.result import Result, Return
from src.app.repositories.reward_entry_repository import RewardEntryRepository
from . import errors
from .dtos import RewardBalanceResponseDTO, RewardEntryDTO


class GetRewardBalance:
    """
    Get Reward Balance Use Case

    Read-only. A user without rewards has balance 0 and no entries.
    """

    def __init__(self, reward_repo: RewardEntryRepository):
        self.reward_repo = reward_repo

    async def execute(self, user_id: str, limit: int = 20) -> Result[RewardBalanceResponseDTO]:
        """
        Execute get reward balance

        Args:
            user_id: Reward holder
            limit: Number of recent entries to include (1..100)

        Returns:
            Result[RewardBalanceResponseDTO]: Balance and newest entries
        """
        if limit < 1 or limit > 100:
            return Return.err(errors.validation_error("limit must be between 1 and 100"))

        balance = await self.reward_repo.get_balance(user_id)
        entries = await self.reward_repo.list_by_user(user_id, limit=limit)

        return Return.ok(
            RewardBalanceResponseDTO(
                user_id=user_id,
                balance=balance,
                entries=[RewardEntryDTO.from_entity(e) for e in entries],
            )
        )
