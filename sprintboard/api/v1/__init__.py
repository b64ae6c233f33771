from fastapi import APIRouter
from sprintboard.api.v1.auth import router as auth_router, register_router
from sprintboard.api.v1.kanban_cards import router as kanban_cards_router
from sprintboard.api.v1.tasks import router as tasks_router
from sprintboard.api.v1.kanban import router as kanban_router
from sprintboard.api.v1.health import router as health_router

# Create main API router
api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router)
api_router.include_router(register_router)
api_router.include_router(kanban_cards_router)
api_router.include_router(tasks_router)
api_router.include_router(kanban_router)
api_router.include_router(health_router)
