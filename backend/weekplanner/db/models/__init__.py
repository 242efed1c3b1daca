"""ORM models exposed for metadata discovery."""
from weekplanner.db.models.kv_entry import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
