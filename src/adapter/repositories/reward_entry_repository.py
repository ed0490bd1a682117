"""SQLAlchemy implementation of RewardEntryRepository

Double-crediting is prevented by the unique constraint on transaction_id.
"""

from typing import List, Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.reward_entry_repository import RewardEntryRepository
from src.domain.reward_entry import RewardEntry


class SqlAlchemyRewardEntryRepository(RewardEntryRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: RewardEntry) -> RewardEntry:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_transaction_id(self, transaction_id: int) -> Optional[RewardEntry]:
        stmt = select(RewardEntry).where(RewardEntry.transaction_id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_balance(self, user_id: str) -> int:
        stmt = (
            select(func.coalesce(func.sum(RewardEntry.amount), 0))
            .where(RewardEntry.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_by_user(self, user_id: str, limit: int = 20) -> List[RewardEntry]:
        stmt = (
            select(RewardEntry)
            .where(RewardEntry.user_id == user_id)
            .order_by(RewardEntry.created_at.desc(), RewardEntry.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
