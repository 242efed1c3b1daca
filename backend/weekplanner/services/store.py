"""Durable key/value store for the single local user's entities."""
from __future__ import annotations

import copy
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from weekplanner.db.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """`get` returns the last written value or the supplied default; `set` commits before returning."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, key: str, default: Any = None) -> Any:
        entry = self.db.get(KeyValueEntry, key)
        if entry is None or entry.value is None:
            return copy.deepcopy(default)
        return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any) -> None:
        entry = self.db.get(KeyValueEntry, key)
        if entry is None:
            entry = KeyValueEntry(key=key, value=value)
            self.db.add(entry)
        else:
            entry.value = value
            flag_modified(entry, "value")
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to persist key %s", key)
            raise

    def delete(self, key: str) -> None:
        entry = self.db.get(KeyValueEntry, key)
        if entry is None:
            return
        self.db.delete(entry)
        self.db.commit()
