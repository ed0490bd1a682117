"""Reward Entry Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.reward_entry import RewardEntry


class RewardEntryRepository(ABC):
    """
    Repository interface for RewardEntry persistence

    transaction_id is unique, so a second reward for the same transaction
    fails at the store.
    """

    @abstractmethod
    async def create(self, entry: RewardEntry) -> RewardEntry:
        """
        Create a reward entry

        Raises:
            IntegrityError: If the transaction already has a reward entry
        """
        pass

    @abstractmethod
    async def get_by_transaction_id(self, transaction_id: int) -> Optional[RewardEntry]:
        pass

    @abstractmethod
    async def get_balance(self, user_id: str) -> int:
        """Sum of all reward entries of a user"""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str, limit: int = 20) -> List[RewardEntry]:
        """Newest entries first"""
        pass
