from sprintboard.models.user import User
from sprintboard.models.kanban_card import KanbanCard, CardPriority
from sprintboard.models.task import Task, EnergyLevel
