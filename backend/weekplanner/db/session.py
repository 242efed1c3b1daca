"""Engine and session factory for the entity store."""
from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from weekplanner.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
    future=True,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db() -> None:
    """Create missing tables; production deployments run the Alembic migration instead."""
    from weekplanner.db.base import Base
    from weekplanner.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.debug("Entity store tables ensured on %s", engine.url.render_as_string(hide_password=True))
