from __future__ import annotations


class ApiError(Exception):
    """Raised at the HTTP boundary; rendered as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = headers


class UpstreamError(Exception):
    """An external dependency answered with a failure (non-2xx, transport error, empty body)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidInputError(Exception):
    """Caller-supplied data rejected before reaching an external service."""
