"""
Password hashing, JWT issuing and the authenticated-user dependency.

A token is only accepted while a matching row exists in the sessions table,
so signing a JWT with the right secret is not enough to get in.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lodging.core.config import get_settings
from lodging.core.logging import get_logger
from lodging.db.session import get_db
from lodging.models.user import UserSession

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(plain_password: str) -> str:
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    payload = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload["exp"] = expire
    # Two sign-ins within the same second must still yield distinct tokens
    payload.setdefault("jti", uuid.uuid4().hex)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Return the user id carried in the token, or None if it is not valid."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="You must be signed in to continue",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> int:
    if credentials is None or not credentials.credentials:
        raise _unauthorized()

    token = credentials.credentials
    user_id = decode_access_token(token)
    if user_id is None:
        logger.info("auth_rejected", reason="invalid_token")
        raise _unauthorized()

    result = await db.execute(
        select(UserSession).where(UserSession.token == token, UserSession.user_id == user_id)
    )
    if result.scalar_one_or_none() is None:
        logger.info("auth_rejected", reason="no_session", user_id=user_id)
        raise _unauthorized()

    return user_id
