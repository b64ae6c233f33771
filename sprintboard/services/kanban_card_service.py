from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from sprintboard.models.kanban_card import (
    KanbanCard,
    CardPriority,
    DEFAULT_CARD_COLOR,
    STANDARD_COLUMNS,
)
from sprintboard.logs import debug_logger, log_function

# Attributes a partial update may touch
UPDATABLE_FIELDS = ("title", "description", "column", "priority", "color", "due_date", "labels")


def group_by_column(cards: List[KanbanCard]) -> Dict[str, List[KanbanCard]]:
    """Bucket cards by column, keeping the standard buckets even when empty"""
    board: Dict[str, List[KanbanCard]] = {column: [] for column in STANDARD_COLUMNS}
    for card in cards:
        board.setdefault(card.column, []).append(card)
    return board


class KanbanCardService:
    """CRUD operations for a user's kanban cards"""

    @staticmethod
    @log_function()
    async def list_by_column(
        db: AsyncSession,
        user_id: int
    ) -> Dict[str, List[KanbanCard]]:
        """All of the user's cards keyed by column, newest first"""
        query = (
            select(KanbanCard)
            .where(KanbanCard.user_id == user_id)
            .order_by(KanbanCard.created_at.desc())
        )
        result = await db.execute(query)
        return group_by_column(list(result.scalars().all()))

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        card_id: str,
        user_id: int
    ) -> Optional[KanbanCard]:
        """Get a card only if it belongs to the user"""
        query = select(KanbanCard).where(
            KanbanCard.id == card_id,
            KanbanCard.user_id == user_id
        )
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        user_id: int,
        title: str,
        column: str,
        description: str = "",
        priority: CardPriority = CardPriority.MEDIUM,
        color: Optional[str] = None,
        due_date: Optional[date] = None,
        labels: Optional[List[str]] = None
    ) -> KanbanCard:
        card = KanbanCard(
            user_id=user_id,
            title=title,
            description=description or "",
            column=column,
            priority=CardPriority(priority).value,
            color=color or DEFAULT_CARD_COLOR,
            due_date=due_date,
            labels=list(labels or []),
        )

        db.add(card)
        await db.commit()
        await db.refresh(card)
        debug_logger.info(f"Card {card.id} created in column '{column}' for user {user_id}")
        return card

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        card_id: str,
        user_id: int,
        **changes
    ) -> Optional[KanbanCard]:
        """Apply a partial update; None when the card is missing or foreign"""
        card = await KanbanCardService.get_by_id(db, card_id, user_id)
        if not card:
            debug_logger.warning(f"Card {card_id} not found for user {user_id}")
            return None

        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "labels":
                value = list(value or [])
            elif field == "due_date":
                pass  # None clears the due date
            elif value is None:
                continue
            setattr(card, field, value)

        await db.commit()
        await db.refresh(card)
        debug_logger.info(f"Card {card_id} updated: {sorted(changes)}")
        return card

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        card_id: str,
        user_id: int
    ) -> bool:
        stmt = delete(KanbanCard).where(
            KanbanCard.id == card_id,
            KanbanCard.user_id == user_id
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0
