"""Error taxonomy shared by the stores, the guards and the routes.

Every failure is raised as a :class:`ServiceError` carrying an
:class:`ErrorKind`; the HTTP status is derived from the kind in
:data:`STATUS_CODES` and nowhere else.
"""
import enum
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

API_NOT_FOUND = "The requested API was not found"
UNEXPECTED_ERROR = "An unexpected error occurred"


class ErrorKind(str, enum.Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHENTICATED = "unauthenticated"
    NOT_AUTHORIZED = "not_authorized"
    NOT_FOUND = "not_found"
    MISSING_AUTH_HEADER = "missing_auth_header"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_AUTHORIZED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.MISSING_AUTH_HEADER: 412,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    def __init__(self, kind: ErrorKind, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        # server-side only, never sent to the client
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.value!r}, {self.message!r})"


def bad_request(message: str) -> ServiceError:
    return ServiceError(ErrorKind.BAD_REQUEST, message)


def not_found(message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def not_authorized(message: str = "Not authorized") -> ServiceError:
    return ServiceError(ErrorKind.NOT_AUTHORIZED, message)


def error_body(status_code: int, message: str) -> dict:
    return {"message": message, "statusCode": status_code}


def format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # drop the "body"/"query"/"path" prefix, keep the field path
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(first.get("msg", "is invalid"))
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    msg = msg[:1].lower() + msg[1:]
    if not loc:
        return msg
    return f'"{".".join(loc)}" {msg}'


async def service_error_handler(request: Request, exc: ServiceError):
    if exc.kind is ErrorKind.INTERNAL:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = format_validation_error(exc)
    return JSONResponse(status_code=400, content=error_body(400, message))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == 404:
        message = API_NOT_FOUND
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("%s %s hit a database error", request.method, request.url.path, exc_info=exc)
    message = "An unexpected error occurred while processing the query to the database"
    return JSONResponse(status_code=500, content=error_body(500, message))


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s raised an unexpected error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(500, UNEXPECTED_ERROR))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
