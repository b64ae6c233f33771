from typing import Optional
from pydantic import BaseModel, Field

from sprintboard.models.task import EnergyLevel


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    energy_level: EnergyLevel = Field(EnergyLevel.MEDIUM, alias="energyLevel")
    category: str = "work"
    completed: bool = False
    estimated_minutes: int = Field(25, alias="estimatedMinutes", gt=0)
    kanban_column: str = Field("todo", alias="kanbanColumn")

    class Config:
        populate_by_name = True


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    energy_level: Optional[EnergyLevel] = Field(None, alias="energyLevel")
    category: Optional[str] = None
    completed: Optional[bool] = None
    estimated_minutes: Optional[int] = Field(None, alias="estimatedMinutes", gt=0)
    kanban_column: Optional[str] = Field(None, alias="kanbanColumn")

    class Config:
        populate_by_name = True


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    energy_level: EnergyLevel = Field(..., alias="energyLevel")
    category: str
    completed: bool
    estimated_minutes: int = Field(..., alias="estimatedMinutes")
    kanban_column: str = Field(..., alias="kanbanColumn")

    class Config:
        from_attributes = True
        populate_by_name = True


class KanbanTaskCreate(BaseModel):
    """Quick task added straight onto the task board"""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    kanban_column: str = Field("todo", alias="kanbanColumn")

    class Config:
        populate_by_name = True


class KanbanTaskUpdate(BaseModel):
    task_id: Optional[int] = Field(None, alias="taskId")
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    kanban_column: Optional[str] = Field(None, alias="kanbanColumn", min_length=1)

    class Config:
        populate_by_name = True

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"task_id"})


class KanbanTaskDelete(BaseModel):
    task_id: Optional[int] = Field(None, alias="taskId")

    class Config:
        populate_by_name = True
