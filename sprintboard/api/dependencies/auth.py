from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.core import get_settings
from sprintboard.db.database import get_async_session
from sprintboard.services.security_service import SecurityService
from sprintboard.models.user import User

settings = get_settings()


def get_session_token(request: Request) -> Optional[str]:
    """Read the JWT from the session cookie"""
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_async_session)
) -> User:
    """
    Get the authenticated user from the session cookie
    
    Raises:
        HTTPException: 401 when the cookie is missing, invalid, expired
        or names an unknown or inactive user
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    
    user = await SecurityService.get_current_user(db, token)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user
