"""Error taxonomy for the moderation pipeline."""


class ModerationError(Exception):
    """Base error for the moderation pipeline."""


class ListFetchError(ModerationError):
    """Raised when the request listing call fails; aborts the whole pass."""


class DetailFetchError(ModerationError):
    """Raised when a single record detail lookup fails."""


class StatusUpdateError(ModerationError):
    """Raised when the status-update call fails."""


class InvalidTransitionError(ModerationError, RuntimeError):
    """Raised when a workflow action is not allowed in the current state."""
