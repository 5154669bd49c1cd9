import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt
# Import passlib for hashing
from passlib.context import CryptContext

from .config import Settings
from .errors import Unauthorized

logger = logging.getLogger(__name__)

# --- Hashing Setup ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
# --- End Hashing Setup ---


@dataclass(frozen=True)
class Identity:
    """Verified claims carried by an access token."""
    user_id: UUID
    email: str


def create_access_token(
    user_id: UUID,
    email: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed access token carrying ``{userId, email}``.

    Args:
        user_id: ID of the authenticated user
        email: The user's email address
        settings: Application settings holding the signing key
        expires_delta: Token lifetime, defaults to JWT_EXPIRATION_MINUTES

    Returns:
        str: Encoded JWT
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    to_encode: Dict[str, Any] = {
        "userId": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """
    Verify a token's signature and expiry and return its identity claims.

    Raises:
        Unauthorized: If the token is invalid, expired or missing claims
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"[AUTH] JWT verify error: {e}")
        raise Unauthorized("Invalid or expired token")

    user_id = payload.get("userId")
    email = payload.get("email")
    if not user_id or not email:
        raise Unauthorized("Invalid or expired token")

    try:
        return Identity(user_id=UUID(str(user_id)), email=email)
    except ValueError:
        raise Unauthorized("Invalid or expired token")
