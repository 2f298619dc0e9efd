"""
Admin authentication.

The shared admin secret is only ever exchanged at login; the bearer token
handed back is a short-lived JWT signed with SECRET_KEY.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shortlink_app.config import settings
from shortlink_app.errors import AuthError

logger = logging.getLogger(__name__)

ADMIN_SUBJECT = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


def check_admin_secret(password: Optional[str]) -> bool:
    return hmac.compare_digest((password or "").encode(), settings.admin_secret.encode())


def create_access_token(subject: str = ADMIN_SUBJECT, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.admin_token_expire_minutes)
    )
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.admin_token_algorithm)


def login(password: Optional[str]) -> str:
    """
    Exchange the admin secret for a token.

    Raises:
        AuthError: wrong or missing password
    """
    if not check_admin_secret(password):
        logger.warning("Failed admin login attempt")
        raise AuthError("Invalid credentials")
    return create_access_token()


def verify_token(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.admin_token_algorithm])
    except JWTError:
        raise AuthError("Invalid token")
    subject = payload.get("sub")
    if subject != ADMIN_SUBJECT:
        raise AuthError("Invalid token")
    return subject


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """FastAPI dependency guarding the admin routes"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError()
    return verify_token(credentials.credentials)
