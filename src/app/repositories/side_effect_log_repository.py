"""Side Effect Log Repository Interface

Defines the contract for tracking follow-up actions of completed
transactions.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from src.domain.side_effect_log import SideEffectLog


class SideEffectLogRepository(ABC):

    @abstractmethod
    async def create(self, log: SideEffectLog) -> SideEffectLog:
        pass

    @abstractmethod
    async def list_by_transaction(self, transaction_id: int) -> List[SideEffectLog]:
        pass

    @abstractmethod
    async def mark_applied(self, log_id: int) -> bool:
        """
        Conditionally mark a log APPLIED

        Only succeeds if the row is not already APPLIED or SKIPPED. Must be
        called in the same unit of work as the effect itself so that a lost
        race rolls the effect back.

        Returns:
            True if this caller finished the effect, False otherwise
        """
        pass

    @abstractmethod
    async def mark_skipped(self, log_id: int, reason: str) -> bool:
        """Conditionally mark a log SKIPPED (same rules as mark_applied)"""
        pass

    @abstractmethod
    async def record_failure(self, log_id: int, error: str) -> None:
        """Mark a log FAILED, store the error and bump attempts"""
        pass

    @abstractmethod
    async def skip_unfinished(self, transaction_id: int, reason: str) -> int:
        """
        Mark every PENDING/FAILED log of a transaction SKIPPED

        Returns:
            Number of logs updated
        """
        pass

    @abstractmethod
    async def list_retryable(
        self, stale_before: datetime, max_attempts: int, limit: int = 100
    ) -> List[SideEffectLog]:
        """
        Logs that need another run

        FAILED logs with attempts below max_attempts, and PENDING logs
        created before stale_before (their authorization is assumed to have
        crashed between commit and side effects).
        """
        pass
