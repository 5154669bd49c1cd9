"""
Authentication dependencies for FastAPI.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from piazza.core.config import Settings
from piazza.core.errors import Unauthorized
from piazza.core.security import Identity, decode_access_token
from piazza.crud import user as user_crud
from piazza.db.dependencies import get_app_settings, get_db
from piazza.db.models.user import User

# Configure logging
logger = logging.getLogger(__name__)

# Bearer token scheme; errors are raised by get_current_identity instead
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/auth/login",
    auto_error=False
)


async def get_current_identity(
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Identity:
    """
    Verify the bearer token and return its ``{userId, email}`` claims.

    Raises:
        Unauthorized: If the header is missing, malformed or the token is invalid
    """
    if not token:
        raise Unauthorized("Authorization header missing or not a Bearer token")
    return decode_access_token(token, settings)


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the acting user for the verified identity.

    Raises:
        Unauthorized: If the token's user no longer exists
    """
    user = await user_crud.get_user(db, identity.user_id)
    if user is None:
        logger.warning(f"[AUTH] Token for unknown user {identity.user_id}")
        raise Unauthorized("User not found")
    return user
