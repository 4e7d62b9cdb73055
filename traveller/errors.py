"""Error taxonomy shared by the search core and the HTTP layer."""

from typing import Any


class AppError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code = "APP_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Any = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class QueryValidationError(AppError):
    """Caller supplied a structurally invalid query.

    ``details`` is a list of ``{"field": ..., "message": ...}`` entries, one per
    violated constraint.
    """

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, errors: list[dict[str, str]], message: str = "Invalid query parameters"):
        super().__init__(message, details=errors)
        self.errors = errors


class ProviderError(AppError):
    """Upstream HTTP, network or parse failure."""

    code = "PROVIDER_ERROR"
    status_code = 502


class RateLimitError(ProviderError):
    """Upstream kept throttling until the retry budget ran out."""

    code = "RATE_LIMIT"
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None):
        details = {"retry_after": retry_after} if retry_after is not None else None
        super().__init__(message, details=details)
        self.retry_after = retry_after


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


def error_payload(exc: Exception) -> tuple[int, dict]:
    """Return ``(status_code, error_body)`` for an exception."""
    if isinstance(exc, AppError):
        body: dict[str, Any] = {"code": exc.code, "message": exc.message}
        if exc.details is not None:
            body["details"] = exc.details
        return exc.status_code, body

    # Unknown failures never leak internals to the caller
    return 500, {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}
