"""
Users Router
============

Account registration for callers already signed in with the identity provider.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scoutme.auth import get_current_uid
from scoutme.dependencies import get_current_user, get_db
from scoutme.exceptions import ConflictError
from scoutme.models import User
from scoutme.schemas import UserRead, UserRegister, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    body: UserRegister,
    uid: str = Depends(get_current_uid),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Register the signed-in caller.

    The uid comes from the verified token, never from the body.
    """
    user = User(
        uid=uid,
        name=body.name,
        email=body.email,
        phone=body.phone,
        photo_url=body.photo_url,
    )
    db.add(user)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("User already registered", code="user_exists")

    logger.info(f"Registered user {uid}")
    return UserResponse(message="User registered successfully!", data=UserRead.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)) -> UserResponse:
    """Get the caller's own account."""
    return UserResponse(message="User fetched successfully", data=UserRead.model_validate(user))
