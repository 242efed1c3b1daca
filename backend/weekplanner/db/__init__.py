"""Database utilities and models."""

from weekplanner.db.base import Base
from weekplanner.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
