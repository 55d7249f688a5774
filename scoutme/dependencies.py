"""
FastAPI Dependencies
====================

Common dependencies for dependency injection.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scoutme.auth import get_current_uid
from scoutme.config import Settings
from scoutme.exceptions import UserNotRegisteredError
from scoutme.models import User


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get a database session from the application's store."""
    async with request.app.state.database.session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    uid: str = Depends(get_current_uid),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The registered user behind the bearer token."""
    result = await db.execute(select(User).where(User.uid == uid))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotRegisteredError(uid)
    return user
