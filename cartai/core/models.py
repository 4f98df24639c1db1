"""
ORM models for database persistence.

WHAT: SQLAlchemy model for saved shopping conversations
WHY: Users can come back to a past negotiation and its result
HOW: One row per conversation; transcripts and result stored as JSON columns
"""

from datetime import datetime
from uuid import uuid4
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, JSON, CheckConstraint, Index
)

from .database import Base


class SavedConversation(Base):
    """
    Saved conversation table.

    WHAT: Chat transcript, extracted requirements, negotiation transcript and result
    WHY: Restore the full shopping session later
    HOW: Requirement columns are nullable because a chat may end before they are known
    """
    __tablename__ = "saved_conversations"

    conversation_id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(200), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=True)
    budget = Column(Float, nullable=True)
    selected_priority = Column(String(20), nullable=True)

    chat_messages = Column(JSON, nullable=False, default=list)
    negotiation_messages = Column(JSON, nullable=False, default=list)
    negotiation_result = Column(JSON, nullable=True)

    # Constraints
    __table_args__ = (
        CheckConstraint("quantity IS NULL OR quantity >= 1", name="check_quantity_positive"),
        CheckConstraint("budget IS NULL OR budget > 0", name="check_budget_positive"),
        CheckConstraint(
            "selected_priority IS NULL OR selected_priority IN ('speed', 'carbon', 'price')",
            name="check_priority_valid"
        ),
        Index("idx_saved_conversations_created", "created_at"),
    )

    def __repr__(self):
        return f"<SavedConversation(id={self.conversation_id}, title={self.title})>"
