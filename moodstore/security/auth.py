"""
Session authentication.

Sign-in itself is handled by the hosted auth provider; requests carry its
access token as ``Authorization: Bearer <jwt>``. Tokens are HS256 JWTs
whose ``sub`` claim is the user id.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header

from ..core.config import settings
from ..core.errors import AuthorizationError

logger = logging.getLogger(__name__)


@dataclass
class SessionUser:
    """Authenticated caller"""
    user_id: str
    email: Optional[str] = None


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Issue a signed access token"""
    now = datetime.now(timezone.utc)
    ttl = expires_minutes if expires_minutes is not None else settings.jwt_ttl_minutes
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=ttl),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> SessionUser:
    """
    Validate a token and return its user.

    Raises:
        AuthorizationError: If the token is expired, malformed or badly signed
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthorizationError("Session expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected access token: {e}")
        raise AuthorizationError("Unauthorized")

    user_id = claims.get("sub")
    if not user_id:
        raise AuthorizationError("Unauthorized")
    return SessionUser(user_id=user_id, email=claims.get("email"))


class AuthDependency:
    """
    FastAPI dependency resolving the caller's session.

    Anonymous callers get ``None`` unless ``require_user`` is set, in which
    case they are rejected with 401. A token that is present but invalid is
    always rejected.
    """

    def __init__(self, require_user: bool = True):
        self.require_user = require_user

    async def __call__(self, authorization: Optional[str] = Header(None)) -> Optional[SessionUser]:
        if not authorization:
            if self.require_user:
                raise AuthorizationError("Unauthorized")
            return None

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise AuthorizationError("Unauthorized")

        return decode_access_token(token.strip())


# Convenience instances
require_user = AuthDependency(require_user=True)
optional_user = AuthDependency(require_user=False)
