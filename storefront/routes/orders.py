from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import models, orders, schemas
from ..db import get_db
from ..errors import bad_request, not_found
from ..guards import require_admin, require_current_user
from ..models import OrderStatus
from . import parse_id

router = APIRouter(tags=["orders"])

USER_ORDERS = "/users/{user_id}/orders"


def _read(order: models.Order) -> schemas.OrderRead:
    return schemas.OrderRead.model_validate(order)


def active_order(user_id: str, order_id: str, db: Session = Depends(get_db)) -> models.Order:
    """Resolve the order addressed by the path; it must still be active.

    Runs as a dependency so the order state is checked before the body is.
    """
    return orders.get_active_order(db, parse_id(user_id, "user"), parse_id(order_id, "order"))


@router.get("/orders", response_model=List[schemas.OrderRead], dependencies=[Depends(require_admin)])
def list_all_orders(db: Session = Depends(get_db)):
    return [_read(order) for order in orders.list_orders(db)]


@router.get(USER_ORDERS, response_model=List[schemas.OrderRead], dependencies=[Depends(require_current_user)])
def list_user_orders(
    user_id: str,
    status: Optional[OrderStatus] = Query(default=None),
    db: Session = Depends(get_db),
):
    uid = parse_id(user_id, "user")
    return [_read(order) for order in orders.list_user_orders(db, uid, status=status)]


@router.post(USER_ORDERS, response_model=schemas.OrderRead, status_code=201, dependencies=[Depends(require_current_user)])
def create_user_order(user_id: str, db: Session = Depends(get_db)):
    uid = parse_id(user_id, "user")
    if orders.has_active_order(db, uid):
        raise bad_request(orders.ACTIVE_ORDER_EXISTS)
    return _read(orders.create_order(db, uid))


@router.get(USER_ORDERS + "/{order_id}", response_model=schemas.OrderRead, dependencies=[Depends(require_current_user)])
def get_user_order(user_id: str, order_id: str, db: Session = Depends(get_db)):
    order = orders.get_user_order(db, parse_id(user_id, "user"), parse_id(order_id, "order"))
    if not order:
        raise not_found(orders.ORDER_NOT_FOUND)
    return _read(order)


@router.put(USER_ORDERS + "/{order_id}", response_model=schemas.OrderRead, dependencies=[Depends(require_current_user)])
def update_user_order(
    payload: schemas.OrderUpdate,
    order: models.Order = Depends(active_order),
    db: Session = Depends(get_db),
):
    return _read(orders.update_order(db, order.user_id, order.id, payload.status))


@router.post(
    USER_ORDERS + "/{order_id}/items",
    response_model=schemas.OrderItemRead,
    status_code=201,
    dependencies=[Depends(require_current_user)],
)
def add_order_item(
    payload: schemas.OrderItemInput,
    order: models.Order = Depends(active_order),
    db: Session = Depends(get_db),
):
    return orders.add_item(db, order, payload.product_id, payload.quantity)


@router.put(
    USER_ORDERS + "/{order_id}/items/{item_id}",
    response_model=schemas.OrderItemRead,
    dependencies=[Depends(require_current_user)],
)
def update_order_item(
    item_id: str,
    payload: schemas.OrderItemInput,
    order: models.Order = Depends(active_order),
    db: Session = Depends(get_db),
):
    return orders.update_item(db, order, parse_id(item_id, "order item"), payload.product_id, payload.quantity)


@router.delete(
    USER_ORDERS + "/{order_id}/items/{item_id}",
    response_model=schemas.OrderItemRead,
    dependencies=[Depends(require_current_user)],
)
def remove_order_item(
    item_id: str,
    order: models.Order = Depends(active_order),
    db: Session = Depends(get_db),
):
    return orders.remove_item(db, order, parse_id(item_id, "order item"))
