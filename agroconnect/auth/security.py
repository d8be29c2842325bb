from datetime import datetime, timedelta, timezone
from typing import Optional

from attrs import define
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from loguru import logger

from agroconnect.core.config import settings
from agroconnect.core.exceptions import UnauthorizedError

bearer_scheme = HTTPBearer(auto_error=False)


@define(frozen=True)
class AuthenticatedUser:
    id: str
    email: Optional[str] = None
    role: Optional[str] = None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token shaped like the hosted provider's. Used for local runs and tests."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    if settings.AUTH_JWT_AUDIENCE and "aud" not in to_encode:
        to_encode["aud"] = settings.AUTH_JWT_AUDIENCE
    return jwt.encode(
        to_encode,
        settings.AUTH_JWT_SECRET.get_secret_value(),
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> AuthenticatedUser:
    try:
        if settings.AUTH_JWT_AUDIENCE:
            payload = jwt.decode(
                token,
                settings.AUTH_JWT_SECRET.get_secret_value(),
                algorithms=[settings.AUTH_JWT_ALGORITHM],
                audience=settings.AUTH_JWT_AUDIENCE,
            )
        else:
            payload = jwt.decode(
                token,
                settings.AUTH_JWT_SECRET.get_secret_value(),
                algorithms=[settings.AUTH_JWT_ALGORITHM],
                options={"verify_aud": False},
            )
    except JWTError as exc:
        logger.info(f"Rejected access token: {exc}")
        raise UnauthorizedError()

    user_id = str(payload.get("sub") or "")
    # the id becomes the first segment of every storage key the user writes
    if not user_id or "/" in user_id or "\\" in user_id or user_id in (".", ".."):
        logger.info(f"Rejected access token with unusable subject {user_id!r}")
        raise UnauthorizedError()

    metadata = payload.get("user_metadata") or {}
    return AuthenticatedUser(id=user_id, email=payload.get("email"), role=metadata.get("role"))


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """Resolve the caller from a Bearer header or, failing that, the session cookie."""
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedError()
    return decode_access_token(token)
