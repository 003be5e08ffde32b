# Core configuration and errors

from .config import settings, get_settings, Settings
from .errors import (
    MoodStoreError,
    ValidationError,
    AuthorizationError,
    NotFoundError,
    RemoteSyncError,
    RenderError,
    MailerNotConfigured,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "MoodStoreError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "RemoteSyncError",
    "RenderError",
    "MailerNotConfigured",
]
