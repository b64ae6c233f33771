import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship

from sprintboard.db.base import Base


class EnergyLevel(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Task(Base):
    """Energy-tagged task worked on in focus sprints"""
    
    __tablename__ = "tasks"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    energy_level = Column(String, nullable=False, default=EnergyLevel.MEDIUM.value)
    category = Column(String, nullable=False, default="work")
    completed = Column(Boolean, default=False)
    estimated_minutes = Column(Integer, default=25)  # one focus sprint
    kanban_column = Column(String, nullable=False, default="todo")
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    user = relationship("User", back_populates="tasks")
