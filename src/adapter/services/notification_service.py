"""Notification Service Implementations

Provides concrete implementations for announcing reward credits.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.reward_entry import RewardEntry

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs reward credits

    Useful for development and testing, or as a fallback.
    """

    async def send_reward_credited(self, entry: RewardEntry) -> bool:
        logger.info(
            f"[REWARD] User: {entry.user_id}, "
            f"Amount: {entry.amount}, "
            f"Transaction: {entry.transaction_id}, "
            f"Description: {entry.description}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that posts reward credits to an HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST credits to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_reward_credited(self, entry: RewardEntry) -> bool:
        """
        Send reward credit via webhook

        Args:
            entry: RewardEntry that was persisted

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "reward_credited",
            "reward_id": entry.id,
            "user_id": entry.user_id,
            "amount": entry.amount,
            "transaction_id": entry.transaction_id,
            "description": entry.description,
            "created_at": entry.created_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for reward {entry.id} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for reward {entry.id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_reward_credited(self, entry: RewardEntry) -> bool:
        """
        Send reward credit to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_reward_credited(entry):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
