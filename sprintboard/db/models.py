# Import all models here so create_all sees them
from sprintboard.db.base import Base
from sprintboard.models.user import User
from sprintboard.models.kanban_card import KanbanCard
from sprintboard.models.task import Task
