"""HTTP translation of booking errors, request errors and rate limits."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import Settings, get_settings
from .errors import BookingError, ConflictError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong, please try again."

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
)


def build_limiter(settings: Settings) -> Limiter:
    """Per-client limiter; route decorators add tighter rules for commands."""

    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.default_rate_limit],
        enabled=settings.rate_limiting_enabled,
    )


limiter = build_limiter(get_settings())


def too_many_requests(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit by %s on %s: %s", get_remote_address(request), request.url.path, exc.detail)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": f"Too many requests ({exc.detail}), please slow down."},
    )


def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content={"detail": exc.message})
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.error("Unexpected booking error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": GENERIC_ERROR},
    )


def _error_location(loc) -> str:
    # Drop the leading "body"/"query" unless it is all there is.
    parts = loc[1:] or loc
    return ".".join(str(part) for part in parts)


def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [f"{_error_location(err['loc'])}: {err['msg']}" for err in exc.errors()]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "; ".join(messages)})


def apply_error_handlers(app: FastAPI) -> None:
    """Install the limiter and map booking, request and rate-limit errors to JSON responses."""

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, too_many_requests)
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
