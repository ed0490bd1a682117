"""SQLAlchemy implementation of SideEffectLogRepository

Finishing a log (APPLIED/SKIPPED) is a conditional UPDATE; the caller
runs it in the same database transaction as the effect, so a runner that
loses the race rolls its effect back.
"""

from datetime import datetime
from typing import List
from sqlalchemy import or_, and_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.side_effect_log_repository import SideEffectLogRepository
from src.domain.side_effect_log import SideEffectLog, SideEffectStatus

UNFINISHED = (SideEffectStatus.PENDING, SideEffectStatus.FAILED)


class SqlAlchemySideEffectLogRepository(SideEffectLogRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, log: SideEffectLog) -> SideEffectLog:
        self.session.add(log)
        await self.session.flush()
        await self.session.refresh(log)
        return log

    async def list_by_transaction(self, transaction_id: int) -> List[SideEffectLog]:
        stmt = (
            select(SideEffectLog)
            .where(SideEffectLog.transaction_id == transaction_id)
            .order_by(SideEffectLog.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_applied(self, log_id: int) -> bool:
        return await self._finish(log_id, SideEffectStatus.APPLIED, None)

    async def mark_skipped(self, log_id: int, reason: str) -> bool:
        return await self._finish(log_id, SideEffectStatus.SKIPPED, reason)

    async def record_failure(self, log_id: int, error: str) -> None:
        stmt = (
            update(SideEffectLog)
            .where(SideEffectLog.id == log_id)
            .where(SideEffectLog.status.in_(UNFINISHED))
            .values(
                status=SideEffectStatus.FAILED,
                attempts=SideEffectLog.attempts + 1,
                last_error=error[:1000],
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def skip_unfinished(self, transaction_id: int, reason: str) -> int:
        stmt = (
            update(SideEffectLog)
            .where(SideEffectLog.transaction_id == transaction_id)
            .where(SideEffectLog.status.in_(UNFINISHED))
            .values(
                status=SideEffectStatus.SKIPPED,
                last_error=reason,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def list_retryable(
        self, stale_before: datetime, max_attempts: int, limit: int = 100
    ) -> List[SideEffectLog]:
        stmt = (
            select(SideEffectLog)
            .where(
                or_(
                    and_(
                        SideEffectLog.status == SideEffectStatus.FAILED,
                        SideEffectLog.attempts < max_attempts,
                    ),
                    and_(
                        SideEffectLog.status == SideEffectStatus.PENDING,
                        SideEffectLog.created_at < stale_before,
                    ),
                )
            )
            .order_by(SideEffectLog.transaction_id, SideEffectLog.id)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _finish(self, log_id: int, status: SideEffectStatus, note) -> bool:
        stmt = (
            update(SideEffectLog)
            .where(SideEffectLog.id == log_id)
            .where(SideEffectLog.status.in_(UNFINISHED))
            .values(status=status, last_error=note, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
