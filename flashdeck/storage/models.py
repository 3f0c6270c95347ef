"""
SQLAlchemy ORM Models for the card store

Defines Deck and Card tables. The scheduling columns on `cards` are the
persisted memory state of each card.
"""

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DeckModel(Base):
    """A deck of cards owned by a single user."""
    __tablename__ = 'decks'

    id = Column(String(36), primary_key=True)
    owner_id = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<DeckModel({self.id}, {self.title!r}, owner={self.owner_id})>"


class CardModel(Base):
    """
    A flashcard and its persisted memory state.
    """
    __tablename__ = 'cards'

    id = Column(String(36), primary_key=True)
    deck_id = Column(String(36), ForeignKey('decks.id', ondelete='CASCADE'), nullable=False, index=True)

    # Content
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)

    # Memory state
    status = Column(String(20), nullable=False, default="new")
    ease = Column(Float, nullable=False, default=2.5)
    interval = Column(Integer, nullable=False, default=0)  # days
    next_review = Column(DateTime(timezone=True), nullable=True)
    last_reviewed = Column(DateTime(timezone=True), nullable=True)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CardModel({self.id}, deck={self.deck_id}, status={self.status})>"
