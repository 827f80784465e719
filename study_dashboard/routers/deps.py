"""Shared router dependencies: DB session and the current user."""
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from study_dashboard.core.config import get_settings
from study_dashboard.core.errors import AuthError
from study_dashboard.core.security import verify_session_token
from study_dashboard.db.session import get_db
from study_dashboard.models import User

settings = get_settings()

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user_optional(request: Request, db: DbSession) -> User | None:
    """Return current user if the auth cookie is valid; else None."""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None
    user_id = verify_session_token(token)
    if user_id is None:
        return None
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def require_user(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    if user is None:
        raise AuthError()
    return user


CurrentUser = Annotated[User, Depends(require_user)]
