"""Notification Service Interface

Defines the contract for telling the rest of the platform that a user
was credited loyalty currency.
"""

from abc import ABC, abstractmethod
from src.domain.reward_entry import RewardEntry


class NotificationService(ABC):
    """
    Abstract notification sink for reward credits

    Implementations can send notifications via:
    - Logs
    - Webhook (HTTP POST)
    - etc.
    """

    @abstractmethod
    async def send_reward_credited(self, entry: RewardEntry) -> bool:
        """
        Announce that `entry.amount` units were credited to `entry.user_id`

        Args:
            entry: Persisted RewardEntry

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
