"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; the API layer never inspects library exceptions
directly. Each kind maps to exactly one HTTP status in register_handlers().

    ValidationError     required field missing / blank        -> 422
    NotFoundError       unknown id, or id owned by another user -> 404
    AuthRequiredError   write attempted with no signed-in owner -> 401
    PersistenceError    storage failed or timed out            -> 503
    EntitlementError    payment provider failed                -> 502
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AutoApplyError(Exception):
    """Base class for every error the services surface to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(AutoApplyError):
    status_code = 422


class NotFoundError(AutoApplyError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthRequiredError(AutoApplyError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class PersistenceError(AutoApplyError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class EntitlementError(AutoApplyError):
    status_code = status.HTTP_502_BAD_GATEWAY


async def autoapply_error_handler(request: Request, exc: AutoApplyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AutoApplyError, autoapply_error_handler)
