"""Error types and FastAPI handlers that render them as `{ok: false, error}`."""
import logging

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base class for errors reported to the client."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UploadRejectedError(RelayError):
    """The request was malformed; nothing was sent to Drive."""
    status_code = status.HTTP_400_BAD_REQUEST


class NoFilesError(UploadRejectedError):
    def __init__(self, message: str = "No files uploaded"):
        super().__init__(message)


class ProviderError(RelayError):
    """A Drive call (folder lookup, folder create or file create) failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    @classmethod
    def from_exception(cls, exc: Exception) -> "ProviderError":
        # HttpError keeps the API's own message in `reason`
        message = getattr(exc, "reason", None) or str(exc) or exc.__class__.__name__
        return cls(message)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


async def handle_relay_errors(request: Request, exc: RelayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


def describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI's error list into one line, e.g. `files.0: Expected UploadFile`."""
    parts = []
    for error in exc.errors():
        # drop the leading "body"/"query" segment
        loc = ".".join(str(part) for part in error.get("loc", ())[1:])
        msg = error.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_errors(exc)
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errors raised by FastAPI/Starlette themselves, e.g. an unparseable multipart body."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.info("%s %s returned %d: %s", request.method, request.url.path, exc.status_code, message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


async def handle_broad_exceptions(request: Request, call_next) -> Response:
    """Turn anything unexpected into a logged 500 with the relay's error shape."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc) or exc.__class__.__name__,
        )
