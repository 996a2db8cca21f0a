"""
Authentication API endpoints.

Provides register, login, logout and user info endpoints.
"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from opsboard.app.db.session import get_db
from opsboard.app.models.user import User
from opsboard.app.schemas.auth import UserRegister, UserLogin, TokenResponse, UserResponse
from opsboard.app.schemas.common import MutationResponse
from opsboard.app.core.security import get_password_hash, verify_password
from opsboard.app.core.jwt import create_access_token
from opsboard.app.core.token_revocation import revoke_token
from opsboard.app.core.dependencies import get_current_user, security

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger("opsboard.auth")


def _token_response(user: User) -> TokenResponse:
    access_token = create_access_token(data={"sub": user.username, "user_id": user.id})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        username=user.username,
        email=user.email,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user and return a token.

    Username and email must both be unused.
    """
    result = await db.execute(
        select(User).where(
            or_(User.username == user_data.username, User.email == user_data.email)
        )
    )
    existing_user = result.scalars().first()

    if existing_user:
        if existing_user.username == user_data.username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already registered"
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        email=user_data.email,
        username=user_data.username,
        name=user_data.name,
        hashed_password=get_password_hash(user_data.password),
        is_active=True,
        last_signed_in=datetime.now(timezone.utc),
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info("Registered user %s", new_user.id)
    return _token_response(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Accepts username or email for login.
    """
    result = await db.execute(
        select(User).where(
            or_(User.username == credentials.username, User.email == credentials.username)
        )
    )
    user = result.scalars().first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning("Failed login for %s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    user.last_signed_in = datetime.now(timezone.utc)
    await db.commit()

    return _token_response(user)


@router.post("/logout", response_model=MutationResponse)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: dict = Depends(get_current_user)
):
    """Revoke the presented token."""
    revoked = await revoke_token(credentials.credentials, current_user["user_id"])
    return MutationResponse(success=revoked)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current authenticated user information.

    Requires valid JWT token in Authorization header.
    """
    result = await db.execute(select(User).where(User.id == current_user["user_id"]))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse.model_validate(user)
