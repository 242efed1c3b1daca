"""FastAPI dependencies for database access."""
from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from weekplanner.db.session import SessionLocal


def get_db() -> Iterator[Session]:
    """Yield a session and always close it once the request is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
