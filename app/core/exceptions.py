"""Domain errors raised by services and rendered by the API exception handler.

Every error carries an HTTP status and a client-safe ``detail``. Anything
internal (the reason a code was rejected, the underlying driver error) stays
on the exception for server-side logging and is never sent to the client.
"""


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidInput(MarketplaceError):
    """Malformed or missing client input. Always client-recoverable."""

    status_code = 400
    detail = "Invalid input"


class Unauthorized(MarketplaceError):
    status_code = 401
    detail = "Missing authorization header"


class Forbidden(MarketplaceError):
    status_code = 403
    detail = "Admin access required"


class NotFoundOrRevoked(MarketplaceError):
    """Seller code is unknown or revoked.

    Both cases share one client-facing message so that callers cannot discover
    which codes exist. ``reason`` is ``"not_found"`` or ``"revoked"`` and is
    only used for logging.
    """

    status_code = 403
    detail = "Invalid seller code"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__()


class CodeNotFound(MarketplaceError):
    """Admin-facing lookup by record id found nothing."""

    status_code = 404
    detail = "Seller code not found"


class TargetNotFound(MarketplaceError):
    status_code = 404
    detail = "Target not found"


class RateLimited(MarketplaceError):
    """Too many requests from one client in the current window."""

    status_code = 429
    detail = "Rate limit exceeded. Please try again later."

    def __init__(self, retry_after_seconds: int):
        self.retry_after_seconds = max(int(retry_after_seconds), 0)
        super().__init__()


class PersistenceFailure(MarketplaceError):
    """The backing store failed.

    ``retryable`` is True for transient conditions (timeouts, dropped
    connections) and False for constraint violations or corrupt state.
    """

    status_code = 500
    detail = "Internal server error"

    def __init__(self, message: str, retryable: bool = False):
        self.message = message
        self.retryable = retryable
        super().__init__()

    def __str__(self) -> str:
        return self.message


class SessionIssueFailure(MarketplaceError):
    """The auth provider could not provision a principal or mint a session."""

    status_code = 500
    detail = "Failed to create session"

    def __init__(self, message: str, retryable: bool = False):
        self.message = message
        self.retryable = retryable
        super().__init__()

    def __str__(self) -> str:
        return self.message


class BlobStorageFailure(MarketplaceError):
    status_code = 500
    detail = "Failed to create upload URL"


class AuthProviderUnavailable(MarketplaceError):
    """The auth provider could not be reached to validate a token."""

    status_code = 503
    detail = "Authentication service unavailable"


class ConfigurationError(MarketplaceError):
    """A required collaborator is not configured."""

    status_code = 500
    detail = "Internal server error"
