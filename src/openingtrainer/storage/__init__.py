"""SQLite-backed persistence."""

from openingtrainer.storage.models import DatabaseMove, DatabasePosition
from openingtrainer.storage.store import SCHEMA_VERSION, TrainerStore

__all__ = [
    "SCHEMA_VERSION",
    "DatabaseMove",
    "DatabasePosition",
    "TrainerStore",
]
