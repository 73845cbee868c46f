from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ggbench.errors import (
    NotFound,
    PersistenceConflict,
    UpstreamUnavailable,
    ValidationError,
)
from ggbench.util.logging import get_logger

logger = get_logger(__name__)

RETRY_AFTER_SECONDS = "1"


def _error_response(status_code, error, headers=None):
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(error)},
        headers=headers,
    )


async def not_found_handler(request: Request, error: NotFound):
    return _error_response(status.HTTP_404_NOT_FOUND, error)


async def validation_error_handler(request: Request, error: ValidationError):
    return _error_response(status.HTTP_400_BAD_REQUEST, error)


async def persistence_conflict_handler(request: Request, error: PersistenceConflict):
    logger.warning("Persistence conflict", path=request.url.path, error=str(error))
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        error,
        headers={"Retry-After": RETRY_AFTER_SECONDS},
    )


async def upstream_unavailable_handler(request: Request, error: UpstreamUnavailable):
    logger.warning("Upstream unavailable", path=request.url.path, error=str(error))
    return _error_response(status.HTTP_502_BAD_GATEWAY, error)


async def request_validation_handler(request: Request, error: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(error.errors())},
    )


def register_exception_handlers(app: FastAPI, malformed_requests_as_400=False):
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(PersistenceConflict, persistence_conflict_handler)
    app.add_exception_handler(UpstreamUnavailable, upstream_unavailable_handler)

    if malformed_requests_as_400:
        app.add_exception_handler(RequestValidationError, request_validation_handler)
