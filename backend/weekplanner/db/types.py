"""Database column type helpers."""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON, TypeDecorator


class JSONBCompat(TypeDecorator):
    """Store entity payloads as JSONB on Postgres and plain JSON on SQLite (the default store)."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":  # pragma: no cover - dialect specific
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())
