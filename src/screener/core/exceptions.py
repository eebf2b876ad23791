from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} with id '{resource_id}' not found",
        )


class BatchValidationError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


class InvalidTransitionError(Exception):
    """Raised when a queue item is moved along an edge the lifecycle forbids."""


class ScoringError(Exception):
    """Base class for a failed call to the scoring service."""

    kind = "scoring_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ScoringTimeoutError(ScoringError):
    kind = "timeout"

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(
            f"Request timed out after {timeout_ms / 1000:g}s. "
            "The scoring service took too long to respond."
        )
        self.timeout_ms = timeout_ms


class RateLimitedError(ScoringError):
    kind = "rate_limited"

    def __init__(self) -> None:
        super().__init__("Scoring service rate limit reached. Try again shortly.")


class ServiceUnavailableError(ScoringError):
    kind = "service_unavailable"

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Scoring service unavailable (HTTP {status_code}).")
        self.status_code = status_code


class RequestFailedError(ScoringError):
    kind = "request_failed"

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"Scoring request failed. {prefix}{detail}".strip())
        self.detail = detail
        self.status_code = status_code


class MalformedResponseError(ScoringError):
    kind = "malformed_response"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Scoring service returned a malformed response: {detail}")
        self.detail = detail
