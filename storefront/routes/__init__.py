from fastapi import APIRouter, Request

from ..config import Settings
from ..errors import bad_request
from ..utils import is_a_number, query_to_number

API_PREFIX = "/api/v1"


def parse_id(value: str, entity: str) -> int:
    if not is_a_number(value):
        raise bad_request(f"The {entity} id is not a valid number")
    return query_to_number(value)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def build_api_router() -> APIRouter:
    from . import authenticate, categories, orders, products, users

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(authenticate.router)
    api.include_router(users.router)
    api.include_router(categories.router)
    api.include_router(products.router)
    api.include_router(orders.router)
    return api
