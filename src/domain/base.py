"""Shared base for domain entities"""

import uuid
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")


def generate_uuid() -> str:
    return uuid.uuid4().hex


class BaseModel(SQLModel):
    pass
