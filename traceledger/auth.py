"""Authentication: configured ledger accounts exchange their identity for a bearer token."""
from typing import Optional
import logging
import time
from datetime import timedelta

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings
from .services.roles import normalize_identity

logger = logging.getLogger(__name__)

# Bearer token scheme
security = HTTPBearer()


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def is_known_account(identity: str) -> bool:
    """Only the configured (unlocked) accounts may sign in."""
    return identity in settings.account_list


def create_access_token(identity: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token for a ledger identity."""
    now = int(time.time())
    if expires_delta:
        exp = now + int(expires_delta.total_seconds())
    else:
        exp = now + int(settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES) * 60
    payload = {"sub": identity, "exp": exp, "iat": now, "type": "access"}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode JWT token."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise _credentials_exception()


def issue_token_for(identity: str) -> str:
    """Validate the requested identity and issue a token for it."""
    try:
        normalized = normalize_identity(identity)
    except ValueError:
        raise _credentials_exception("Unknown account")
    if not is_known_account(normalized):
        logger.warning("Token requested for unknown account %s", normalized)
        raise _credentials_exception("Unknown account")
    return create_access_token(normalized)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Get current authenticated ledger identity."""
    payload = decode_token(credentials.credentials)

    if payload.get("type") != "access":
        raise _credentials_exception("Invalid token type")

    subject = payload.get("sub")
    if not subject:
        raise _credentials_exception()
    try:
        identity = normalize_identity(str(subject))
    except ValueError:
        raise _credentials_exception()
    if not is_known_account(identity):
        raise _credentials_exception("Account no longer configured")
    return identity
