from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sprintboard.db import init_db, dispose_db
from sprintboard.core import get_settings
from sprintboard.api.v1 import api_router
from sprintboard.core.middleware import RequestLoggingMiddleware
from sprintboard.logs.server_log import api_logger

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        await init_db()
        api_logger.info("Database initialized")
    except Exception as e:
        api_logger.error(f"Error initializing database: {e}")
        raise

    yield

    await dispose_db()
    api_logger.info("Database connections closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Focus sprints: kanban board, energy tasks and cookie sessions",
    version="0.1.0",
    lifespan=lifespan,
)

# Credentialed CORS cannot use a wildcard origin list in browsers;
# set ALLOWED_ORIGINS explicitly in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.get("/")
async def root():
    """Liveness endpoint"""
    return {"message": f"{settings.PROJECT_NAME} is running"}


if __name__ == "__main__":
    import uvicorn
    
    api_logger.info("Starting server on http://0.0.0.0:8000")
    
    uvicorn.run(
        "sprintboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
