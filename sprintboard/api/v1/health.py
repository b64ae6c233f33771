import os
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.db.database import get_async_session
from sprintboard.models.user import User
from sprintboard.logs import api_logger

router = APIRouter(tags=["health"])


def _environment_report() -> dict:
    return {
        "DEBUG": os.getenv("DEBUG", "False"),
        "DATABASE_URL": "Set" if os.getenv("DATABASE_URL") else "Not set",
        "SECRET_KEY": "Set" if os.getenv("SECRET_KEY") else "Not set",
    }


@router.get("/health")
async def health(db: AsyncSession = Depends(get_async_session)):
    """Report configuration presence and database reachability"""
    environment = _environment_report()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        result = await db.execute(select(func.count(User.id)))
        user_count = result.scalar() or 0
    except Exception as e:
        api_logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "ERROR",
                "message": "System check failed",
                "error": {"message": str(e)},
                "environment": environment,
                "timestamp": timestamp,
            },
        )

    return {
        "status": "OK",
        "message": "All systems operational",
        "environment": environment,
        "database": {"connected": True, "userCount": user_count},
        "timestamp": timestamp,
    }
