from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, validator

from sprintboard.models.kanban_card import CardPriority, DEFAULT_CARD_COLOR


def _parse_due_date(value):
    # Browsers send full ISO timestamps ("2025-05-29T20:59:59.000Z"); keep the date part
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    if isinstance(value, str) and not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


class KanbanCardCreate(BaseModel):
    """Schema for card creation; title and column are checked by the route"""
    title: Optional[str] = None
    column: Optional[str] = None
    description: Optional[str] = ""
    priority: CardPriority = CardPriority.MEDIUM
    color: Optional[str] = DEFAULT_CARD_COLOR
    due_date: Optional[date] = Field(None, alias="dueDate")
    labels: Optional[List[str]] = None

    @validator("due_date", pre=True)
    def parse_due_date(cls, value):
        return _parse_due_date(value)

    class Config:
        populate_by_name = True


class KanbanCardUpdate(BaseModel):
    """Schema for partial card update; only fields sent are applied"""
    card_id: Optional[str] = Field(None, alias="cardId")
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    column: Optional[str] = Field(None, min_length=1)
    priority: Optional[CardPriority] = None
    color: Optional[str] = None
    due_date: Optional[date] = Field(None, alias="dueDate")
    labels: Optional[List[str]] = None

    @validator("due_date", pre=True)
    def parse_due_date(cls, value):
        return _parse_due_date(value)

    class Config:
        populate_by_name = True

    def changes(self) -> dict:
        """Fields explicitly present in the request, keyed by model attribute"""
        data = self.model_dump(exclude_unset=True, exclude={"card_id"})
        if data.get("priority") is not None:
            data["priority"] = CardPriority(data["priority"]).value
        return data


class KanbanCardDelete(BaseModel):
    card_id: Optional[str] = Field(None, alias="cardId")

    class Config:
        populate_by_name = True


class KanbanCardResponse(BaseModel):
    """Schema for card response"""
    id: str
    title: str
    description: str = ""
    column: str
    priority: CardPriority = CardPriority.MEDIUM
    color: str = DEFAULT_CARD_COLOR
    due_date: Optional[date] = Field(None, alias="dueDate")
    labels: List[str] = []
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str
