from typing import Dict, List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.db.database import get_async_session
from sprintboard.api.dependencies.auth import get_current_user
from sprintboard.models.user import User
from sprintboard.models.task import EnergyLevel
from sprintboard.services.task_service import TaskService, group_tasks_by_column
from sprintboard.schemas.task import (
    KanbanTaskCreate,
    KanbanTaskUpdate,
    KanbanTaskDelete,
    TaskResponse,
)
from sprintboard.schemas.kanban_card import MessageResponse

router = APIRouter(
    prefix="/kanban",
    tags=["kanban"],
)


def _require_task_id(task_id):
    if task_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Task ID is required"
        )
    return task_id


@router.get("", response_model=Dict[str, List[TaskResponse]])
async def get_task_board(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """The caller's tasks keyed by kanban column, newest first"""
    tasks = await TaskService.get_by_user(db=db, user_id=current_user.id)
    return group_tasks_by_column(tasks)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_board_task(
    task_create: KanbanTaskCreate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await TaskService.create(
        db,
        current_user.id,
        title=task_create.title,
        description=task_create.description,
        kanban_column=task_create.kanban_column,
        energy_level=EnergyLevel.MEDIUM,
        category="work",
        completed=False,
        estimated_minutes=25,
    )


@router.put("", response_model=TaskResponse)
async def update_board_task(
    task_update: KanbanTaskUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Rename, describe or move a task between kanban columns"""
    task_id = _require_task_id(task_update.task_id)

    task = await TaskService.update(db, task_id, current_user.id, **task_update.changes())
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.delete("", response_model=MessageResponse)
async def delete_board_task(
    task_delete: KanbanTaskDelete,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    task_id = _require_task_id(task_delete.task_id)

    deleted = await TaskService.delete(db=db, task_id=task_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return {"message": "Task deleted successfully"}
