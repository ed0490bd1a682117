"""SQLAlchemy Catalog Service Implementation

Reads the catalog tables owned by the surrounding application and
performs the conditional merchandise stock decrement.
"""

import logging
from typing import Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.catalog_service import CatalogService, ArtistInfo, EventInfo
from src.domain.catalog import Artist, Event, Merchandise, Album, Track

logger = logging.getLogger(__name__)


class SqlAlchemyCatalogService(CatalogService):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_artist(self, artist_id: str) -> Optional[ArtistInfo]:
        artist = await self.session.get(Artist, artist_id)
        if not artist:
            return None
        return ArtistInfo(id=artist.id, user_id=artist.user_id)

    async def get_event(self, event_id: str) -> Optional[EventInfo]:
        stmt = (
            select(Event, Artist.user_id)
            .join(Artist, Artist.id == Event.artist_id, isouter=True)
            .where(Event.id == event_id)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if not row:
            return None

        event, artist_user_id = row
        return EventInfo(
            id=event.id,
            artist_id=event.artist_id,
            artist_user_id=artist_user_id,
            title=event.title,
            is_paid=event.is_paid,
            price=event.price,
            currency=event.currency,
        )

    async def merchandise_exists(self, merchandise_id: str) -> bool:
        return await self._exists(Merchandise, merchandise_id)

    async def album_exists(self, album_id: str) -> bool:
        return await self._exists(Album, album_id)

    async def track_exists(self, track_id: str) -> bool:
        return await self._exists(Track, track_id)

    async def decrement_stock(self, merchandise_id: str) -> bool:
        """
        Take one unit of stock with a single conditional UPDATE

        Args:
            merchandise_id: Merchandise ID

        Returns:
            True if stock was > 0 and got decremented
        """
        stmt = (
            update(Merchandise)
            .where(Merchandise.id == merchandise_id)
            .where(Merchandise.stock > 0)
            .values(stock=Merchandise.stock - 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def _exists(self, model, item_id: str) -> bool:
        stmt = select(model.id).where(model.id == item_id)
        result = await self.session.execute(stmt)
        return result.first() is not None
