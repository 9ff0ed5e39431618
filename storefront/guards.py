"""Route guards.

Each guard is a FastAPI dependency meant for a route's ``dependencies=[...]``
list, so it runs before payload validation and before the handler. A failing
guard raises a :class:`ServiceError`; a passing guard changes nothing.
"""
import logging

from fastapi import Request

from .auth import TokenClaims, TokenService
from .errors import ErrorKind, ServiceError, not_authorized
from .utils import to_number

logger = logging.getLogger(__name__)

HEADER_MISSING = "The Authorization header was missing"
HEADER_INVALID = "Invalid Authorization header format"


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def read_bearer_token(request: Request) -> str:
    header = request.headers.get("authorization")
    if not header:
        raise ServiceError(ErrorKind.MISSING_AUTH_HEADER, HEADER_MISSING)
    parts = header.split(" ", 1)
    if len(parts) < 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise ServiceError(ErrorKind.MISSING_AUTH_HEADER, HEADER_INVALID)
    return parts[1].strip()


def authenticate_request(request: Request) -> TokenClaims:
    token = read_bearer_token(request)
    return get_token_service(request).verify(token)


def require_authenticated(request: Request) -> None:
    authenticate_request(request)


def require_admin(request: Request) -> None:
    claims = authenticate_request(request)
    if not claims.is_admin:
        logger.info("user %s is not an admin for %s %s", claims.user_id, request.method, request.url.path)
        raise not_authorized()


def require_current_user(request: Request) -> None:
    claims = authenticate_request(request)
    path_user_id = to_number(request.path_params.get("user_id"))
    if claims.user_id is None or path_user_id is None or claims.user_id != path_user_id:
        logger.info("user %s may not act as user %s", claims.user_id, request.path_params.get("user_id"))
        raise not_authorized()
