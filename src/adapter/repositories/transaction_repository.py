"""SQLAlchemy implementation of TransactionRepository

Status transitions are conditional UPDATEs (WHERE status = expected), so
two concurrent authorizations of the same transaction cannot both succeed.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.transaction_repository import TransactionRepository, PayerTotal
from src.domain.transaction import Transaction, TransactionStatus


class SqlAlchemyTransactionRepository(TransactionRepository):
    """
    SQLAlchemy implementation of TransactionRepository

    Features:
    - Compare-and-set status updates
    - Reads bypass the identity map so callers always see the stored status
    - Revenue aggregation queries
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def compare_and_set_status(
        self,
        transaction_id: int,
        expected: TransactionStatus,
        new_status: TransactionStatus,
    ) -> bool:
        """
        Atomically move a transaction between statuses

        Args:
            transaction_id: Transaction ID
            expected: Status the row must currently hold
            new_status: Status to write

        Returns:
            True if exactly one row was updated
        """
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.status == expected)
            .values(status=new_status, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_by_payer(
        self, payer_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Transaction], int]:
        return await self._paginate(Transaction.payer_id == payer_id, limit, offset)

    async def list_by_artist(
        self, artist_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Transaction], int]:
        return await self._paginate(Transaction.artist_id == artist_id, limit, offset)

    async def get_completed_by_artist(self, artist_id: str) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.artist_id == artist_id)
            .where(Transaction.status == TransactionStatus.COMPLETED)
            .order_by(Transaction.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_top_payers(self, artist_id: str, limit: int) -> List[PayerTotal]:
        total_spent = func.sum(Transaction.amount).label("total_spent")
        stmt = (
            select(
                Transaction.payer_id,
                total_spent,
                func.count(Transaction.id).label("transaction_count"),
            )
            .where(Transaction.artist_id == artist_id)
            .where(Transaction.status == TransactionStatus.COMPLETED)
            .group_by(Transaction.payer_id)
            .order_by(total_spent.desc(), Transaction.payer_id.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [
            PayerTotal(
                payer_id=row.payer_id,
                total_spent=Decimal(str(row.total_spent)),
                transaction_count=int(row.transaction_count),
            )
            for row in result.all()
        ]

    async def _paginate(self, condition, limit: int, offset: int) -> Tuple[List[Transaction], int]:
        count_stmt = select(func.count()).select_from(Transaction).where(condition)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Transaction)
            .where(condition)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
