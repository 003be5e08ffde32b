"""Error taxonomy shared by the store, the cart client and the invoice flow"""


class MoodStoreError(Exception):
    """Base exception for Mood Store errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MoodStoreError):
    """Missing required field or out-of-range value; nothing was mutated"""

    status_code = 400


class AuthorizationError(MoodStoreError):
    """No active session"""

    status_code = 401


class NotFoundError(MoodStoreError):
    """Order, product or cart line absent or not owned by the caller"""

    status_code = 404


class RemoteSyncError(MoodStoreError):
    """A remote write failed after the local cart was already changed"""

    def __init__(self, message: str, operation: str, product_id: str):
        super().__init__(message)
        self.operation = operation
        self.product_id = product_id


class RenderError(MoodStoreError):
    """Invoice could not be produced"""


class MailerNotConfigured(MoodStoreError):
    """SMTP transport settings are missing"""
