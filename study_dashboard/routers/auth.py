"""Auth routes: register, login, logout, current user. Session via signed cookie."""
from fastapi import APIRouter, Response
from sqlalchemy import or_, select

from study_dashboard.core.config import get_settings
from study_dashboard.core.errors import AuthError, ValidationError
from study_dashboard.core.security import create_session_token, hash_password, verify_password
from study_dashboard.models import User
from study_dashboard.routers.deps import CurrentUser, DbSession
from study_dashboard.schemas.stats import MessageSchema
from study_dashboard.schemas.user import UserCreateSchema, UserLoginSchema, UserOutSchema

router = APIRouter(prefix="/api", tags=["auth"])
settings = get_settings()


def _set_auth_cookie(response: Response, user_id: int) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_session_token(user_id),
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=UserOutSchema, status_code=201)
async def register(body: UserCreateSchema, response: Response, db: DbSession):
    """Create a user and log them in."""
    result = await db.execute(
        select(User).where(or_(User.email == body.email, User.username == body.username))
    )
    existing = result.scalars().first()
    if existing is not None:
        if existing.email == body.email:
            raise ValidationError.for_field("email", "Email already registered")
        raise ValidationError.for_field("username", "Username already taken")

    user = User(
        email=body.email,
        username=body.username,
        hashed_password=hash_password(body.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    _set_auth_cookie(response, user.id)
    return user


@router.post("/login", response_model=UserOutSchema)
async def login(body: UserLoginSchema, response: Response, db: DbSession):
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(body.password, user.hashed_password):
        raise AuthError("Incorrect email or password")

    _set_auth_cookie(response, user.id)
    return user


@router.post("/logout", response_model=MessageSchema)
async def logout(response: Response):
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return MessageSchema(message="Successfully logged out")


@router.get("/user", response_model=UserOutSchema)
async def current_user(user: CurrentUser):
    return user
