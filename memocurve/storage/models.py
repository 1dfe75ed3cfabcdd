"""
SQLAlchemy ORM Models for item persistence.

Defines the item, review history and user stats tables.
"""

from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ItemRecord(Base):
    """
    Persistent memory state and content for a single item.
    """
    __tablename__ = 'items'

    id = Column(String(64), primary_key=True, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)  # Library order

    # Content (owned by the content collaborator)
    word = Column(String(255), nullable=False, default="")
    content = Column(JSON, nullable=True)
    added_at = Column(DateTime(timezone=True), nullable=True)

    # Long-term memory parameters
    stability = Column(Float, nullable=False, default=0.0)
    difficulty = Column(Float, nullable=False, default=0.0)

    # Review tracking
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)
    consecutive_correct = Column(Integer, nullable=False, default=0)
    last_review_date = Column(DateTime(timezone=True), nullable=True)
    next_review_date = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ItemRecord({self.id}, {self.word!r}, reps={self.reps})>"


class ReviewHistoryRecord(Base):
    """
    One entry of an item's bounded review history.

    position 0 is the newest entry.
    """
    __tablename__ = 'review_history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(64), ForeignKey('items.id'), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    rating = Column(Integer, nullable=False)  # 1=FORGOT, 2=HARD, 3=GOOD, 4=EASY
    reviewed_at = Column(DateTime(timezone=True), nullable=False)
    duration_ms = Column(Integer, nullable=False, default=0)
    stability_before = Column(Float, nullable=False, default=0.0)

    def __repr__(self):
        return f"<ReviewHistoryRecord({self.item_id}#{self.position}, rating={self.rating})>"


class UserStatsRecord(Base):
    """
    Check-in and streak statistics (single row per user).
    """
    __tablename__ = 'user_stats'

    user_id = Column(String(255), primary_key=True, nullable=False)
    streak = Column(Integer, nullable=False, default=0)
    last_login_date = Column(Date, nullable=True)
    total_words_learned = Column(Integer, nullable=False, default=0)
    words_today = Column(Integer, nullable=False, default=0)
    history = Column(JSON, nullable=False, default=list)  # [{"day": "YYYY-MM-DD", "count": n}]

    def __repr__(self):
        return f"<UserStatsRecord({self.user_id}, streak={self.streak})>"
