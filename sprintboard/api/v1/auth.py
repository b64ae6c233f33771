from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.db.database import get_async_session
from sprintboard.schemas.auth import UserCreate, UserLogin, UserResponse, AuthResponse
from sprintboard.schemas.kanban_card import MessageResponse
from sprintboard.services.security_service import SecurityService
from sprintboard.api.dependencies.auth import get_current_user
from sprintboard.models.user import User
from sprintboard.logs import debug_logger, api_logger

router = APIRouter(prefix="/auth", tags=["auth"])

# Registration lives outside the /auth prefix
register_router = APIRouter(tags=["auth"])


@register_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session)
):
    """
    Register a new user and start a session
    """
    existing_user = await SecurityService.get_user_by_email_or_username(
        db, user_data.email, user_data.username
    )
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists"
        )

    user = User(
        email=user_data.email,
        username=user_data.username,
        hashed_password=SecurityService.create_password_hash(user_data.password)
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)
    debug_logger.debug(f"Registered user {user.id}")

    SecurityService.set_session_cookie(response, SecurityService.create_session_token(user.id))

    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_async_session)
):
    """
    Check credentials and set the session cookie
    """
    api_logger.info(f"Login attempt for {credentials.email}")
    user = await SecurityService.authenticate_user(
        db, credentials.email, credentials.password
    )

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    SecurityService.set_session_cookie(response, SecurityService.create_session_token(user.id))

    return {"message": "Logged in successfully", "user": user}


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Expire the session cookie"""
    SecurityService.clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    return current_user
