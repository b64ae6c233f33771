import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.api.v1.tasks import (
    get_recommended_tasks,
    create_task,
    get_task,
    update_task,
    delete_task,
)
from sprintboard.api.v1.kanban import (
    get_task_board,
    create_board_task,
    update_board_task,
    delete_board_task,
)
from sprintboard.api.v1.health import health
from sprintboard.models.task import Task, EnergyLevel
from sprintboard.models.user import User
from sprintboard.schemas.task import (
    TaskCreate,
    TaskUpdate,
    KanbanTaskCreate,
    KanbanTaskUpdate,
    KanbanTaskDelete,
)
from sprintboard.services.task_service import TaskService, group_tasks_by_column


def make_task(task_id, energy="medium", completed=False, column="todo"):
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        energy_level=energy,
        category="work",
        completed=completed,
        estimated_minutes=25,
        kanban_column=column,
        user_id=1,
    )


class TestRecommend:
    """Energy-based filtering"""

    def test_matching_open_tasks_only(self):
        tasks = [
            make_task(1, "high"),
            make_task(2, "low"),
            make_task(3, "high", completed=True),
            make_task(4, "high"),
        ]

        result = TaskService.recommend(tasks, EnergyLevel.HIGH)

        assert [task.id for task in result] == [1, 4]

    def test_accepts_plain_string(self):
        assert [task.id for task in TaskService.recommend([make_task(1, "low")], "low")] == [1]

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            TaskService.recommend([], "extreme")


class TestTaskService:
    """Service layer against a mocked session"""

    def setup_method(self):
        self.mock_db = AsyncMock(spec=AsyncSession)
        self.mock_db.add = MagicMock()

    @pytest.mark.asyncio
    async def test_create_normalizes_energy(self):
        task = await TaskService.create(
            self.mock_db, 1, title="Deep work", energy_level=EnergyLevel.HIGH, unknown="x"
        )

        assert task.energy_level == "high"
        assert task.user_id == 1
        assert not hasattr(task, "unknown")
        self.mock_db.add.assert_called_once_with(task)

    @pytest.mark.asyncio
    async def test_update_skips_nulls_except_description(self):
        task = make_task(1)
        task.description = "old"
        with patch.object(TaskService, 'get_by_id', return_value=task):
            result = await TaskService.update(
                self.mock_db, 1, 1, title=None, description=None, completed=True
            )

        assert result is task
        assert task.title == "Task 1"
        assert task.description is None
        assert task.completed is True


class TestTaskEndpoints:
    """Route handlers with the service patched out"""

    def setup_method(self):
        self.mock_db = AsyncMock(spec=AsyncSession)
        self.user = MagicMock(spec=User)
        self.user.id = 1

    @pytest.mark.asyncio
    async def test_recommended(self):
        tasks = [make_task(1, "low"), make_task(2, "medium")]
        with patch('sprintboard.api.v1.tasks.TaskService.get_by_user', return_value=tasks):
            result = await get_recommended_tasks(
                energy=EnergyLevel.LOW, db=self.mock_db, current_user=self.user
            )

        assert [task.id for task in result] == [1]

    @pytest.mark.asyncio
    async def test_create_task(self):
        with patch('sprintboard.api.v1.tasks.TaskService.create',
                   return_value=make_task(5)) as mock_create:
            result = await create_task(
                TaskCreate(**{"title": "Inbox zero", "energyLevel": "low"}),
                db=self.mock_db,
                current_user=self.user,
            )

        assert result.id == 5
        args, kwargs = mock_create.call_args
        assert args == (self.mock_db, 1)
        assert kwargs["energy_level"] == EnergyLevel.LOW
        assert kwargs["estimated_minutes"] == 25

    @pytest.mark.asyncio
    async def test_get_task_not_found(self):
        with patch('sprintboard.api.v1.tasks.TaskService.get_by_id', return_value=None):
            with pytest.raises(HTTPException) as exc_info:
                await get_task(99, db=self.mock_db, current_user=self.user)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND
        assert exc_info.value.detail == "Task not found"

    @pytest.mark.asyncio
    async def test_update_task_passes_only_sent_fields(self):
        with patch('sprintboard.api.v1.tasks.TaskService.update',
                   return_value=make_task(1, completed=True)) as mock_update:
            await update_task(
                1, TaskUpdate(completed=True), db=self.mock_db, current_user=self.user
            )

        mock_update.assert_called_once_with(self.mock_db, 1, 1, completed=True)

    @pytest.mark.asyncio
    async def test_delete_task(self):
        with patch('sprintboard.api.v1.tasks.TaskService.delete', return_value=True):
            result = await delete_task(1, db=self.mock_db, current_user=self.user)

        assert result == {"message": "Task deleted successfully"}

    @pytest.mark.asyncio
    async def test_delete_task_not_found(self):
        with patch('sprintboard.api.v1.tasks.TaskService.delete', return_value=False):
            with pytest.raises(HTTPException) as exc_info:
                await delete_task(1, db=self.mock_db, current_user=self.user)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND


class TestTaskBoard:
    """Tasks grouped by kanban column"""

    def setup_method(self):
        self.mock_db = AsyncMock(spec=AsyncSession)
        self.user = MagicMock(spec=User)
        self.user.id = 1

    def test_fixed_buckets_first(self):
        board = group_tasks_by_column([make_task(1, column="later"), make_task(2, column="done")])

        assert list(board) == ["todo", "in-progress", "done", "later"]
        assert board["todo"] == []
        assert [task.id for task in board["later"]] == [1]

    @pytest.mark.asyncio
    async def test_get_task_board_keeps_service_order(self):
        tasks = [make_task(3, column="in-progress"), make_task(2), make_task(1, column="in-progress")]
        with patch('sprintboard.api.v1.kanban.TaskService.get_by_user', return_value=tasks) as mock_get:
            board = await get_task_board(db=self.mock_db, current_user=self.user)

        mock_get.assert_called_once_with(db=self.mock_db, user_id=1)
        assert [task.id for task in board["in-progress"]] == [3, 1]
        assert [task.id for task in board["todo"]] == [2]
        assert board["done"] == []

    @pytest.mark.asyncio
    async def test_create_board_task_uses_defaults(self):
        with patch('sprintboard.api.v1.kanban.TaskService.create',
                   return_value=make_task(7, column="review")) as mock_create:
            await create_board_task(
                KanbanTaskCreate(**{"title": "Plan", "kanbanColumn": "review"}),
                db=self.mock_db,
                current_user=self.user,
            )

        args, kwargs = mock_create.call_args
        assert args == (self.mock_db, 1)
        assert kwargs["kanban_column"] == "review"
        assert kwargs["energy_level"] == EnergyLevel.MEDIUM
        assert kwargs["estimated_minutes"] == 25

    @pytest.mark.asyncio
    async def test_update_board_task_moves_column(self):
        with patch('sprintboard.api.v1.kanban.TaskService.update',
                   return_value=make_task(1, column="done")) as mock_update:
            await update_board_task(
                KanbanTaskUpdate(**{"taskId": 1, "kanbanColumn": "done"}),
                db=self.mock_db,
                current_user=self.user,
            )

        mock_update.assert_called_once_with(self.mock_db, 1, 1, kanban_column="done")

    @pytest.mark.asyncio
    async def test_update_board_task_not_found(self):
        with patch('sprintboard.api.v1.kanban.TaskService.update', return_value=None):
            with pytest.raises(HTTPException) as exc_info:
                await update_board_task(
                    KanbanTaskUpdate(**{"taskId": 9, "title": "x"}),
                    db=self.mock_db,
                    current_user=self.user,
                )

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_task_id_required(self):
        with pytest.raises(HTTPException) as exc_info:
            await delete_board_task(KanbanTaskDelete(), db=self.mock_db, current_user=self.user)

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
        assert exc_info.value.detail == "Task ID is required"

    @pytest.mark.asyncio
    async def test_delete_board_task(self):
        with patch('sprintboard.api.v1.kanban.TaskService.delete', return_value=True):
            result = await delete_board_task(
                KanbanTaskDelete(taskId=1), db=self.mock_db, current_user=self.user
            )

        assert result == {"message": "Task deleted successfully"}


class TestHealth:
    """Health check endpoint"""

    def setup_method(self):
        self.mock_db = AsyncMock(spec=AsyncSession)

    @pytest.mark.asyncio
    async def test_ok(self):
        result = MagicMock()
        result.scalar.return_value = 3
        self.mock_db.execute.return_value = result

        report = await health(db=self.mock_db)

        assert report["status"] == "OK"
        assert report["database"] == {"connected": True, "userCount": 3}

    @pytest.mark.asyncio
    async def test_database_failure(self):
        self.mock_db.execute.side_effect = RuntimeError("connection refused")

        response = await health(db=self.mock_db)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
