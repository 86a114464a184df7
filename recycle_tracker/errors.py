"""
Error taxonomy for Recycle Tracker.

All failures are explicit exceptions rooted at RecycleTrackerError so callers
can decide on a fallback (manual item entry, retry with another name, ...).
"""


class RecycleTrackerError(Exception):
    """Base class for every error raised by the tracker core."""


class NotFoundError(RecycleTrackerError):
    """A barcode, user or username is absent."""


class ItemNotFoundError(NotFoundError):
    """Raised when a barcode has no catalog entry."""
    def __init__(self, barcode: str):
        super().__init__(f"Unknown barcode: {barcode}")
        self.barcode = barcode


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not belong to a registered account."""
    def __init__(self, user_id: str):
        super().__init__(f"Unknown user: {user_id}")
        self.user_id = user_id


class AccountAlreadyExistsError(RecycleTrackerError):
    """Raised when registering a username that is already taken."""
    def __init__(self, username: str):
        super().__init__(f"Username already registered: {username}")
        self.username = username


class InvalidInputError(RecycleTrackerError, ValueError):
    """Negative or malformed values rejected at the boundary."""
