"""Catalog read models

Tables owned by the surrounding catalog application. The engine only
reads them (existence, price, paid flag, owner) and performs the
conditional stock decrement on merchandise.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Artist(BaseModel, table=True):
    __tablename__ = "artists"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    user_id: str = Field(index=True, description="User account owning the artist profile")
    name: str = Field(default="")


class Event(BaseModel, table=True):
    __tablename__ = "events"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(index=True)
    title: str = Field(default="")
    is_paid: bool = Field(default=False)
    price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
    )
    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False, default="USD"),
    )


class Merchandise(BaseModel, table=True):
    __tablename__ = "merchandise"
    __table_args__ = (
        CheckConstraint('stock >= 0', name='merchandise_stock_non_negative'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(index=True)
    name: str = Field(default="")
    price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
    )
    stock: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
    )


class Album(BaseModel, table=True):
    __tablename__ = "albums"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(index=True)
    title: str = Field(default="")


class Track(BaseModel, table=True):
    __tablename__ = "tracks"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    album_id: str = Field(index=True)
    title: str = Field(default="")
