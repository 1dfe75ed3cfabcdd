"""Persistence for items and user stats."""

from memocurve.storage.database import (
    delete_item,
    get_database_url,
    get_engine,
    get_session,
    init_db,
    load_items,
    load_stats,
    reset_db,
    sanitize_memory,
    save_items,
    save_stats,
)
from memocurve.storage.models import Base, ItemRecord, ReviewHistoryRecord, UserStatsRecord

__all__ = [
    "Base",
    "ItemRecord",
    "ReviewHistoryRecord",
    "UserStatsRecord",
    "delete_item",
    "get_database_url",
    "get_engine",
    "get_session",
    "init_db",
    "load_items",
    "load_stats",
    "reset_db",
    "sanitize_memory",
    "save_items",
    "save_stats",
]
