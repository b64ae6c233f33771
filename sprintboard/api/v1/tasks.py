from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.db.database import get_async_session
from sprintboard.api.dependencies.auth import get_current_user
from sprintboard.models.user import User
from sprintboard.models.task import EnergyLevel
from sprintboard.services.task_service import TaskService
from sprintboard.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from sprintboard.schemas.kanban_card import MessageResponse

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


@router.get("", response_model=List[TaskResponse])
async def get_tasks(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await TaskService.get_by_user(db=db, user_id=current_user.id)


@router.get("/recommended", response_model=List[TaskResponse])
async def get_recommended_tasks(
    energy: EnergyLevel = Query(EnergyLevel.MEDIUM),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Open tasks matching the caller's current energy level"""
    tasks = await TaskService.get_by_user(db=db, user_id=current_user.id)
    return TaskService.recommend(tasks, energy)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_create: TaskCreate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await TaskService.create(db, current_user.id, **task_create.model_dump())


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    task = await TaskService.get_by_id(db=db, task_id=task_id, user_id=current_user.id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    task = await TaskService.update(
        db, task_id, current_user.id, **task_update.model_dump(exclude_unset=True)
    )
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    deleted = await TaskService.delete(db=db, task_id=task_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return {"message": "Task deleted successfully"}
