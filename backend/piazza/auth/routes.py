"""
Email/password authentication routes.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from piazza.auth.dependencies import get_current_user
from piazza.core.config import Settings
from piazza.core.errors import Conflict, Unauthorized
from piazza.core.security import create_access_token, get_password_hash, verify_password
from piazza.crud import user as user_crud
from piazza.db.dependencies import get_app_settings, get_db
from piazza.db.models.user import User
from piazza.db.session import commit
from piazza.schemas.auth import AuthResponse, EmailLoginRequest, EmailRegisterRequest, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(message: str, user: User, settings: Settings) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(user.id, user.email, settings),
        user=UserRead.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_email(
    registration: EmailRegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Register a new user with name, email and password.

    Raises:
        Conflict: 409 if the email is already registered
    """
    email = registration.email.lower().strip()
    logger.info(f"[AUTH] Registration attempt for email: {email}")

    if await user_crud.get_user_by_email(db, email):
        raise Conflict("User already exists")

    try:
        user = await user_crud.create_user(
            db,
            name=registration.name,
            email=email,
            password_hash=get_password_hash(registration.password),
        )
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise Conflict("User already exists")
    await commit(db)

    logger.info(f"[AUTH] New user created: {user.id}")
    return _auth_response("User registered successfully", user, settings)


@router.post("/login", response_model=AuthResponse)
async def login_email(
    credentials: EmailLoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Authenticate with email and password.

    Raises:
        Unauthorized: 401 for an unknown email or a wrong password
    """
    user = await user_crud.get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"[AUTH] Invalid credentials for: {credentials.email}")
        raise Unauthorized("Invalid credentials")

    logger.info(f"[AUTH] Login successful for user: {user.id}")
    return _auth_response("Login successful", user, settings)


@router.get("/me", response_model=UserRead)
async def read_users_me(current_user: User = Depends(get_current_user)):
    """Retrieve the details of the currently authenticated user."""
    return current_user
