from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError
from jose import JWTError, jwt
from loguru import logger

from taskboard.core.config import settings
from taskboard.core.errors import UnauthorizedError

PROJECT_ACCESS_TOKEN_TYPE = "projectAccess"
# Project claim of tokens issued at login without a project; no membership matches it
NO_PROJECT = UUID(int=0)
BEARER_PREFIX = "Bearer "

ph = PasswordHasher()


@dataclass(frozen=True)
class ProjectAccess:
    """Identity resolved from a verified project-access token."""
    user_id: UUID
    project_id: UUID


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a hashed password"""
    if not hashed_password:
        return False
    try:
        return ph.verify(hashed_password, plain_password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def get_password_hash(password: str) -> str:
    """Hash a password for storing"""
    return ph.hash(password)


def create_project_access_token(
    user_id: Union[UUID, str],
    project_id: Union[UUID, str],
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Sign a token that lets ``user_id`` act on ``project_id``.

    Nothing is persisted: the signature and the ``exp`` claim are the only
    source of truth, so a token cannot be revoked before it expires.
    """
    if expires_minutes is None:
        expires_minutes = settings.PROJECT_ACCESS_TOKEN_EXPIRE_MINUTES
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes)
    payload = {
        "sub": str(user_id),
        "project": str(project_id),
        "type": PROJECT_ACCESS_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def strip_bearer(token: str) -> str:
    if token.startswith(BEARER_PREFIX):
        return token[len(BEARER_PREFIX):].strip()
    return token.strip()


def verify_project_access_token(token: Optional[str]) -> ProjectAccess:
    """
    Verify a project-access token, with or without the ``Bearer`` prefix.

    Raises:
        UnauthorizedError: missing or malformed token, bad signature, expired,
            or a payload that is not a project-access payload.
    """
    if not token or not token.strip():
        raise UnauthorizedError("Token is required")

    raw_token = strip_bearer(token)
    try:
        payload = jwt.decode(
            raw_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"Rejected project-access token: {str(e)}")
        raise UnauthorizedError()

    if (
        not payload.get("sub")
        or not payload.get("project")
        or payload.get("type") != PROJECT_ACCESS_TOKEN_TYPE
    ):
        logger.warning("Rejected project-access token: invalid payload")
        raise UnauthorizedError("Invalid token payload")

    try:
        return ProjectAccess(
            user_id=UUID(str(payload["sub"])),
            project_id=UUID(str(payload["project"])),
        )
    except ValueError:
        raise UnauthorizedError("Invalid token payload")
