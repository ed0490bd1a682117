"""Get Revenue Summary Use Case

Read-only aggregation of an artist's COMPLETED transactions.
"""

from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import Transaction
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, RevenueSummaryDTO

MONTH_WINDOW = 6


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def trailing_months(now: datetime, count: int = MONTH_WINDOW) -> List[str]:
    """Year-month keys of the `count` calendar months ending with now's month, oldest first"""
    current = now.year * 12 + now.month - 1
    return [month_key(index // 12, index % 12 + 1) for index in range(current - count + 1, current + 1)]


class GetRevenueSummary:
    """
    Get Revenue Summary Use Case

    Business Rules:
    1. Only COMPLETED transactions of the artist count
    2. total_revenue = sum of amounts = sum of revenue_by_source
    3. revenue_by_month covers the trailing 6 calendar months including the
       current one, zero-filled, oldest first; older transactions count in
       the totals but fall outside the month series
    4. Never mutates state
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        catalog: CatalogService,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.transaction_repo = transaction_repo
        self.catalog = catalog
        self.clock = clock

    async def execute(self, artist_id: str, actor: Optional[ActorDTO] = None) -> Result[RevenueSummaryDTO]:
        """
        Execute revenue summary

        Args:
            artist_id: Artist identifier
            actor: Caller; None skips the owner check

        Returns:
            Result[RevenueSummaryDTO]: Summary or error

        Errors:
            ARTIST_NOT_FOUND: Unknown artist
            FORBIDDEN: Caller is neither the artist nor an admin
        """
        artist = await self.catalog.get_artist(artist_id)
        if not artist:
            return Return.err(Error(code=errors.ARTIST_NOT_FOUND, message=f"Artist {artist_id} not found"))

        if actor is not None and not owns_artist(artist.user_id, actor):
            return Return.err(errors.forbidden("Only the artist or an admin can view revenue"))

        transactions = await self.transaction_repo.get_completed_by_artist(artist_id)
        return Return.ok(self.summarize(artist_id, transactions))

    def summarize(self, artist_id: str, transactions: List[Transaction]) -> RevenueSummaryDTO:
        total = Decimal("0")
        by_source: Dict[str, Decimal] = {}
        by_month: Dict[str, Decimal] = OrderedDict(
            (key, Decimal("0")) for key in trailing_months(self.clock())
        )

        for txn in transactions:
            amount = Decimal(txn.amount)
            total += amount
            by_source[txn.source.value] = by_source.get(txn.source.value, Decimal("0")) + amount

            key = month_key(txn.created_at.year, txn.created_at.month)
            if key in by_month:
                by_month[key] += amount

        return RevenueSummaryDTO(
            artist_id=artist_id,
            total_revenue=total,
            revenue_by_source=by_source,
            revenue_by_month=dict(by_month),
            transaction_count=len(transactions),
        )
