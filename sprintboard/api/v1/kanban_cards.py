from typing import Dict, List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.db.database import get_async_session
from sprintboard.api.dependencies.auth import get_current_user
from sprintboard.models.user import User
from sprintboard.services.kanban_card_service import KanbanCardService
from sprintboard.schemas.kanban_card import (
    KanbanCardCreate,
    KanbanCardUpdate,
    KanbanCardDelete,
    KanbanCardResponse,
    MessageResponse,
)
from sprintboard.logs import debug_logger

router = APIRouter(
    prefix="/kanban-cards",
    tags=["kanban-cards"],
)


def _require_card_id(card_id):
    if not card_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Card ID is required"
        )
    return card_id


@router.get("", response_model=Dict[str, List[KanbanCardResponse]])
async def get_board(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """All of the caller's cards keyed by column"""
    return await KanbanCardService.list_by_column(db=db, user_id=current_user.id)


@router.post("", response_model=KanbanCardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    card_create: KanbanCardCreate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Create a card; the server assigns its id"""
    if not card_create.title or not card_create.column:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and column are required"
        )

    card = await KanbanCardService.create(
        db=db,
        user_id=current_user.id,
        title=card_create.title,
        column=card_create.column,
        description=card_create.description,
        priority=card_create.priority,
        color=card_create.color,
        due_date=card_create.due_date,
        labels=card_create.labels,
    )
    debug_logger.debug(f"User {current_user.id} created card {card.id}")
    return card


@router.put("", response_model=KanbanCardResponse)
async def update_card(
    card_update: KanbanCardUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Partially update one of the caller's cards, including its column"""
    card_id = _require_card_id(card_update.card_id)

    card = await KanbanCardService.update(
        db,
        card_id,
        current_user.id,
        **card_update.changes()
    )
    if not card:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Card not found"
        )
    return card


@router.delete("", response_model=MessageResponse)
async def delete_card(
    card_delete: KanbanCardDelete,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    card_id = _require_card_id(card_delete.card_id)

    deleted = await KanbanCardService.delete(db=db, card_id=card_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Card not found"
        )
    return {"message": "Card deleted successfully"}
