import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Text, JSON, Index
from sqlalchemy.orm import relationship

from sprintboard.db.base import Base


class CardPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


DEFAULT_CARD_COLOR = "#3b82f6"

# Buckets always present in a board listing, in display order
STANDARD_COLUMNS = ("todo", "in-progress", "done", "backlog", "review", "archived")


def _new_card_id() -> str:
    return uuid.uuid4().hex


class KanbanCard(Base):
    """Card on a user's kanban board"""
    
    __tablename__ = "kanban_cards"
    __table_args__ = (
        Index("ix_kanban_cards_user_column", "user_id", "column"),
        Index("ix_kanban_cards_user_created", "user_id", "created_at"),
    )
    
    id = Column(String(32), primary_key=True, default=_new_card_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    # Free-form column id; client-created columns are accepted as-is
    column = Column(String, nullable=False, default="todo")
    priority = Column(String, nullable=False, default=CardPriority.MEDIUM.value)
    color = Column(String, nullable=False, default=DEFAULT_CARD_COLOR)  # display hint, e.g. #RRGGBB
    due_date = Column(Date, nullable=True)
    labels = Column(JSON, nullable=False, default=list)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    user = relationship("User", back_populates="cards")
