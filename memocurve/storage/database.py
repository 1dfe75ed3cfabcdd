"""
Database - Item and Stats Persistence

Handles all database operations for items, their review history and
user stats. Uses SQLAlchemy ORM; SQLite by default, any SQLAlchemy URL
via DATABASE_URL.

This module handles ONLY database I/O.
Algorithm logic is handled by the memocurve.fsrs package.

Rows are sanitized on load: legacy or malformed memory fields are
repaired (and logged) before a MemoryState is built, because the
scheduler rejects structurally invalid states.
"""

from __future__ import annotations
import logging
import math
import os
from datetime import date, datetime, timezone
from typing import Any, Optional, Sequence

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from memocurve.fsrs.constants import (
    DEFAULT_PARAMETERS,
    D_MAX,
    D_MIN,
    HISTORY_CAPACITY,
    Rating,
    S_MIN,
)
from memocurve.fsrs.memory_state import Item, MemoryState, ReviewLogEntry
from memocurve.schemas import WordDetails
from memocurve.stats import DailyStat, UserStats
from memocurve.storage.models import (
    Base,
    ItemRecord,
    ReviewHistoryRecord,
    UserStatsRecord,
)


logger = logging.getLogger(__name__)

# Load environment
load_dotenv()

# Database configuration
DB_NAME = "memocurve"
DEFAULT_DATABASE_URL = f"sqlite:///{DB_NAME}.db"

_engines: dict[str, Engine] = {}


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_default_user_id() -> str:
    """Get default user id for scoping stats."""
    return os.getenv("DEFAULT_USER_ID", "default")


def get_database_url() -> str:
    """
    Get the database URL from environment variables.

    Uses DATABASE_URL if set, otherwise a local SQLite file.
    In TEST_MODE the database name is prefixed with 'test_'.

    Returns:
        SQLAlchemy database URL
    """
    url = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL

    if is_test_mode():
        # Replace production db name with test db name
        return url.replace(f"/{DB_NAME}", f"/test_{DB_NAME}")

    return url


def get_engine(url: Optional[str] = None) -> Engine:
    """
    Get a (cached) SQLAlchemy engine for the database.

    Server databases get a connection pool; SQLite uses the
    dialect's default pool.

    Returns:
        SQLAlchemy Engine instance
    """
    if url is None:
        url = get_database_url()

    engine = _engines.get(url)
    if engine is None:
        if url.startswith("sqlite"):
            engine = create_engine(url, echo=False)
        else:
            engine = create_engine(
                url,
                pool_size=5,           # Keep 5 connections open
                max_overflow=10,       # Allow up to 10 extra connections
                pool_pre_ping=True,    # Verify connections before use
                echo=False
            )
        _engines[url] = engine
    return engine


def get_session(engine: Optional[Engine] = None) -> Session:
    """
    Get a SQLAlchemy session for database operations.

    Returns:
        SQLAlchemy Session instance
    """
    if engine is None:
        engine = get_engine()
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    return SessionLocal()


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    if engine is None:
        engine = get_engine()
    Base.metadata.create_all(engine)


def reset_db(engine: Optional[Engine] = None) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All review history will be lost!
    """
    if engine is None:
        engine = get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("All tables dropped")

    # Recreate tables
    init_db(engine)


# ---- Conversion helpers ----

def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values (SQLite drops tzinfo) and normalize aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _dump_content(content: Any) -> Any:
    if isinstance(content, BaseModel):
        return content.model_dump(mode="json")
    return content


def _load_content(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    try:
        return WordDetails.model_validate(raw)
    except ValidationError:
        logger.debug("Content is not a WordDetails record, keeping raw value")
        return raw


def _finite(value: Any, default: float) -> float:
    if value is None:
        return default
    value = float(value)
    return value if math.isfinite(value) else default


def _load_history(item_id: str, rows: Sequence[ReviewHistoryRecord]) -> tuple[ReviewLogEntry, ...]:
    entries: list[ReviewLogEntry] = []
    for row in sorted(rows, key=lambda r: r.position):
        try:
            rating = Rating(row.rating)
        except ValueError:
            logger.warning("Item %s: dropping history entry with unknown rating %r", item_id, row.rating)
            continue
        entries.append(ReviewLogEntry(
            rating=rating,
            reviewed_at=_as_utc(row.reviewed_at),
            duration_ms=int(row.duration_ms or 0),
            stability_before=_finite(row.stability_before, 0.0)
        ))
    return tuple(entries[:HISTORY_CAPACITY])


def sanitize_memory(record: ItemRecord, history: tuple[ReviewLogEntry, ...]) -> MemoryState:
    """
    Build a valid MemoryState from a stored row, repairing legacy fields.

    Repairs:
    - Missing or negative counters default to 0; lapses are capped at reps
    - Missing next_review_date falls back to added_at (or now): due immediately
    - Reviewed items get difficulty clamped to [1, 10] (base difficulty if unset),
      stability floored at S_MIN and last_review_date from history if missing
    - Unreviewed items get stability and difficulty reset to 0
    """
    item_id = record.id

    def repaired(message: str, *args) -> None:
        logger.warning("Item %s: " + message, item_id, *args)

    reps = max(0, int(record.reps or 0))
    lapses = max(0, int(record.lapses or 0))
    if lapses > reps:
        repaired("lapses %d exceed reps %d, capping", lapses, reps)
        lapses = reps
    consecutive_correct = max(0, int(record.consecutive_correct or 0))

    next_review_date = _as_utc(record.next_review_date)
    if next_review_date is None:
        next_review_date = _as_utc(record.added_at) or datetime.now(timezone.utc)
        repaired("missing next_review_date, due immediately")
    last_review_date = _as_utc(record.last_review_date)

    stability = _finite(record.stability, 0.0)
    difficulty = _finite(record.difficulty, 0.0)

    if reps > 0:
        if not D_MIN <= difficulty <= D_MAX:
            fixed = DEFAULT_PARAMETERS.base_difficulty if difficulty <= 0 else min(max(D_MIN, difficulty), D_MAX)
            repaired("difficulty %r out of range, using %r", difficulty, fixed)
            difficulty = fixed
        if stability < S_MIN:
            repaired("stability %r below minimum, using %r", stability, S_MIN)
            stability = S_MIN
        if last_review_date is None:
            last_review_date = history[0].reviewed_at if history else next_review_date
            repaired("missing last_review_date, using %s", last_review_date.isoformat())
    elif stability != 0.0 or difficulty != 0.0:
        repaired("unreviewed item had stability/difficulty set, resetting")
        stability, difficulty = 0.0, 0.0

    return MemoryState(
        stability=stability,
        difficulty=difficulty,
        reps=reps,
        lapses=lapses,
        consecutive_correct=consecutive_correct,
        last_review_date=last_review_date,
        next_review_date=next_review_date,
        history=history
    )


# ---- Items ----

def load_items(engine: Optional[Engine] = None) -> list[Item]:
    """
    Load all items in their saved order.

    Returns:
        List of Item values with sanitized memory state
    """
    session = get_session(engine)
    try:
        records = session.query(ItemRecord).order_by(ItemRecord.sort_order, ItemRecord.id).all()
        history_rows: dict[str, list[ReviewHistoryRecord]] = {}
        for row in session.query(ReviewHistoryRecord).all():
            history_rows.setdefault(row.item_id, []).append(row)

        items = []
        for record in records:
            history = _load_history(record.id, history_rows.get(record.id, []))
            items.append(Item(
                id=record.id,
                memory=sanitize_memory(record, history),
                word=record.word or "",
                content=_load_content(record.content),
                added_at=_as_utc(record.added_at)
            ))
        return items
    finally:
        session.close()


def save_items(items: Sequence[Item], engine: Optional[Engine] = None) -> None:
    """
    Save all items in a single transaction (last write wins).

    Every given item is inserted or updated, its history rewritten,
    and items missing from the list are deleted.

    Args:
        items: The complete item collection
    """
    ids = {item.id for item in items}

    session = get_session(engine)
    try:
        existing = {record.id: record for record in session.query(ItemRecord).all()}
        history_rows: list[ReviewHistoryRecord] = []

        # History is rewritten wholesale
        session.query(ReviewHistoryRecord).delete(synchronize_session=False)
        for record_id, record in existing.items():
            if record_id not in ids:
                session.delete(record)

        for index, item in enumerate(items):
            record = existing.get(item.id)
            if record is None:
                record = ItemRecord(id=item.id)
                session.add(record)

            memory = item.memory
            record.sort_order = index
            record.word = item.word
            record.content = _dump_content(item.content)
            record.added_at = _as_utc(item.added_at)
            record.stability = memory.stability
            record.difficulty = memory.difficulty
            record.reps = memory.reps
            record.lapses = memory.lapses
            record.consecutive_correct = memory.consecutive_correct
            record.last_review_date = _as_utc(memory.last_review_date)
            record.next_review_date = _as_utc(memory.next_review_date)

            history_rows.extend(
                ReviewHistoryRecord(
                    item_id=item.id,
                    position=position,
                    rating=int(entry.rating),
                    reviewed_at=_as_utc(entry.reviewed_at),
                    duration_ms=entry.duration_ms,
                    stability_before=entry.stability_before
                )
                for position, entry in enumerate(memory.history)
            )

        # Item rows must exist before their history rows
        session.flush()
        session.add_all(history_rows)
        session.commit()
        logger.debug("Saved %d items", len(items))
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def delete_item(item_id: str, engine: Optional[Engine] = None) -> bool:
    """
    Delete one item and its history.

    Returns:
        True if the item existed
    """
    session = get_session(engine)
    try:
        session.query(ReviewHistoryRecord).filter(
            ReviewHistoryRecord.item_id == item_id
        ).delete(synchronize_session=False)
        deleted = session.query(ItemRecord).filter(
            ItemRecord.id == item_id
        ).delete(synchronize_session=False)
        session.commit()
        return deleted > 0
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---- Stats ----

def load_stats(user_id: Optional[str] = None, engine: Optional[Engine] = None) -> UserStats:
    """
    Load user stats.

    Returns:
        Stored UserStats, or empty stats for a new user
    """
    if user_id is None:
        user_id = get_default_user_id()

    session = get_session(engine)
    try:
        record = session.get(UserStatsRecord, user_id)
        if record is None:
            return UserStats()

        history = tuple(
            DailyStat(day=date.fromisoformat(entry["day"]), count=int(entry["count"]))
            for entry in (record.history or [])
        )
        return UserStats(
            streak=record.streak,
            last_login_date=record.last_login_date,
            total_words_learned=record.total_words_learned,
            words_today=record.words_today,
            history=history
        )
    finally:
        session.close()


def save_stats(stats: UserStats, user_id: Optional[str] = None, engine: Optional[Engine] = None) -> None:
    """Save user stats (insert or update)."""
    if user_id is None:
        user_id = get_default_user_id()

    session = get_session(engine)
    try:
        record = session.get(UserStatsRecord, user_id)
        if record is None:
            record = UserStatsRecord(user_id=user_id)
            session.add(record)

        record.streak = stats.streak
        record.last_login_date = stats.last_login_date
        record.total_words_learned = stats.total_words_learned
        record.words_today = stats.words_today
        record.history = [
            {"day": entry.day.isoformat(), "count": entry.count}
            for entry in stats.history
        ]
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
