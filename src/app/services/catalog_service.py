"""Catalog Service Interface

Narrow read (and stock-decrement) view of the catalog owned by the
surrounding application: artists, events, merchandise, albums, tracks.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class ArtistInfo(BaseModel):
    id: str
    user_id: str


class EventInfo(BaseModel):
    id: str
    artist_id: str
    artist_user_id: Optional[str] = None
    title: str = ""
    is_paid: bool = False
    price: Optional[Decimal] = None
    currency: str = "USD"


class CatalogService(ABC):

    @abstractmethod
    async def get_artist(self, artist_id: str) -> Optional[ArtistInfo]:
        pass

    @abstractmethod
    async def get_event(self, event_id: str) -> Optional[EventInfo]:
        """
        Event with its paid flag, price and owning artist's user

        Returns:
            EventInfo if found, None otherwise
        """
        pass

    @abstractmethod
    async def merchandise_exists(self, merchandise_id: str) -> bool:
        pass

    @abstractmethod
    async def album_exists(self, album_id: str) -> bool:
        pass

    @abstractmethod
    async def track_exists(self, track_id: str) -> bool:
        pass

    @abstractmethod
    async def decrement_stock(self, merchandise_id: str) -> bool:
        """
        Decrement merchandise stock by one, only if stock > 0

        Must be a single conditional update, never read-modify-write.

        Returns:
            True if a unit was taken, False if stock was already 0
            (or the item does not exist)
        """
        pass
