from pydantic import BaseModel, EmailStr, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict
from typing import List, Optional
from decimal import Decimal

from .models import OrderStatus
from .utils import sanitize_input


class CamelModel(BaseModel):
    """Base for every wire model: snake_case in Python, camelCase in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _clean_text(value: str) -> str:
    cleaned = sanitize_input(value)
    if not cleaned:
        raise ValueError("is not allowed to be empty")
    return cleaned


# -------------------- Users --------------------

class Credentials(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr

    @field_validator("first_name", "last_name")
    @classmethod
    def clean_names(cls, v: str) -> str:
        return _clean_text(v)


class UserCreate(UserUpdate):
    password: str = Field(..., min_length=1)


class UserRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    is_admin: bool = False


class AuthenticationResult(CamelModel):
    token: str
    user: UserRead


# -------------------- Catalog --------------------

class CategoryInput(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _clean_text(v)


class CategoryRead(CamelModel):
    id: int
    name: str


class ProductInput(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., gt=Decimal("0"))
    category_id: PositiveInt
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _clean_text(v)


class ProductRead(CamelModel):
    id: int
    name: str
    price: Decimal
    category_id: int
    image_url: Optional[str] = None


# -------------------- Orders --------------------

class OrderUpdate(CamelModel):
    # status is the only mutable field of an order
    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class OrderItemInput(CamelModel):
    product_id: PositiveInt
    quantity: int = Field(..., ge=0)


class OrderItemRead(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int


class OrderRead(CamelModel):
    id: int
    user_id: int
    status: OrderStatus
    items: List[OrderItemRead] = []
