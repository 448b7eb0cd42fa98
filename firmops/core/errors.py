"""Service error kinds.

Services raise these instead of ``HTTPException`` so the same code can run
behind the HTTP layer, a worker, or a test. Each kind fixes its status code;
the application maps them to responses in one exception handler, dispatching
on type rather than on message text.

    ServiceError
    +-- ValidationError      422  malformed input, bad reference in a payload
    +-- NotFoundError        404  referenced record does not exist
    +-- ConflictError        409  uniqueness precondition violated
    +-- UnauthorizedError    403  caller lacks rights over this resource
    +-- UnexpectedError      500  anything else; cause is logged, not exposed
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import status

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class ServiceError(Exception):
    """Base class for errors surfaced by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "SERVICE_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class ValidationError(ServiceError):
    status_code = 422
    code = "VALIDATION_ERROR"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "UNAUTHORIZED"


class UnexpectedError(ServiceError):
    code = "UNEXPECTED_ERROR"

    def __init__(self, **context: Any) -> None:
        super().__init__(UNEXPECTED_ERROR_MESSAGE, **context)


@contextmanager
def unexpected_error_guard(logger: Any, event: str, **context: Any) -> Iterator[None]:
    """Let service errors through; log anything else and raise ``UnexpectedError``."""

    try:
        yield
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception(event, **context)
        raise UnexpectedError(**context) from exc
