"""Key/value entity store ORM model."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, func

from weekplanner.db.base import Base
from weekplanner.db.types import JSONBCompat


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String(128), primary_key=True)
    value = Column(JSONBCompat, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
