# Session authentication

from .auth import (
    SessionUser,
    AuthDependency,
    create_access_token,
    decode_access_token,
    require_user,
    optional_user,
)

__all__ = [
    "SessionUser",
    "AuthDependency",
    "create_access_token",
    "decode_access_token",
    "require_user",
    "optional_user",
]
