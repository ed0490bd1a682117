"""SQLAlchemy implementation of TicketRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import exists, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ticket_repository import TicketRepository
from src.domain.ticket import Ticket, TicketStatus
from src.domain.transaction import Transaction, TransactionStatus


class SqlAlchemyTicketRepository(TicketRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, ticket: Ticket) -> Ticket:
        self.session.add(ticket)
        await self.session.flush()
        await self.session.refresh(ticket)
        return ticket

    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.id == ticket_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_transaction_id(self, transaction_id: int) -> Optional[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.transaction_id == transaction_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_event_and_user(
        self, event_id: str, user_id: str, status: Optional[TicketStatus] = None
    ) -> List[Ticket]:
        stmt = select(Ticket).where(Ticket.event_id == event_id, Ticket.user_id == user_id)

        if status:
            stmt = stmt.where(Ticket.status == status)

        stmt = stmt.order_by(Ticket.created_at.desc(), Ticket.id.desc()).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_event(self, event_id: str) -> List[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.event_id == event_id)
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_user(self, user_id: str) -> List[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.user_id == user_id)
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def compare_and_set_status(
        self,
        ticket_id: int,
        expected: TicketStatus,
        new_status: TicketStatus,
        require_completed_transaction: bool = False,
    ) -> bool:
        stmt = (
            update(Ticket)
            .where(Ticket.id == ticket_id)
            .where(Ticket.status == expected)
        )

        if require_completed_transaction:
            stmt = stmt.where(
                exists().where(
                    Transaction.id == Ticket.transaction_id,
                    Transaction.status == TransactionStatus.COMPLETED,
                )
            )

        stmt = stmt.values(status=new_status, updated_at=datetime.utcnow()).execution_options(
            synchronize_session=False
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
