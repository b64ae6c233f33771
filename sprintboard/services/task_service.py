from typing import Dict, Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from sprintboard.models.task import Task, EnergyLevel
from sprintboard.logs import debug_logger, log_function

UPDATABLE_FIELDS = (
    "title",
    "description",
    "energy_level",
    "category",
    "completed",
    "estimated_minutes",
    "kanban_column",
)

# Task board buckets returned even when empty
TASK_BOARD_COLUMNS = ("todo", "in-progress", "done")


def group_tasks_by_column(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """Bucket tasks by kanban column, fixed buckets first, input order kept"""
    board: Dict[str, List[Task]] = {column: [] for column in TASK_BOARD_COLUMNS}
    for task in tasks:
        board.setdefault(task.kanban_column, []).append(task)
    return board


class TaskService:
    """CRUD and energy-based recommendation for focus tasks"""

    @staticmethod
    def recommend(tasks: Iterable[Task], energy: EnergyLevel) -> List[Task]:
        """Open tasks that match the given energy level, in input order"""
        level = EnergyLevel(energy).value
        return [
            task for task in tasks
            if task.energy_level == level and not task.completed
        ]

    @staticmethod
    async def get_by_user(db: AsyncSession, user_id: int) -> List[Task]:
        query = select(Task).where(Task.user_id == user_id).order_by(Task.created_at.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(db: AsyncSession, task_id: int, user_id: int) -> Optional[Task]:
        query = select(Task).where(Task.id == task_id, Task.user_id == user_id)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    @log_function()
    async def create(db: AsyncSession, user_id: int, **fields) -> Task:
        if "energy_level" in fields:
            fields["energy_level"] = EnergyLevel(fields["energy_level"]).value
        task = Task(
            user_id=user_id,
            **{key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        )
        db.add(task)
        await db.commit()
        await db.refresh(task)
        return task

    @staticmethod
    @log_function()
    async def update(db: AsyncSession, task_id: int, user_id: int, **changes) -> Optional[Task]:
        task = await TaskService.get_by_id(db, task_id, user_id)
        if not task:
            debug_logger.warning(f"Task {task_id} not found for user {user_id}")
            return None

        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            # Only description is nullable
            if value is None and field != "description":
                continue
            if field == "energy_level":
                value = EnergyLevel(value).value
            setattr(task, field, value)

        await db.commit()
        await db.refresh(task)
        return task

    @staticmethod
    @log_function()
    async def delete(db: AsyncSession, task_id: int, user_id: int) -> bool:
        stmt = delete(Task).where(Task.id == task_id, Task.user_id == user_id)
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0
