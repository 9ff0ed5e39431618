"""Order lifecycle.

An order is created ``active`` and moves once to ``complete``; nothing about a
complete order can change afterwards. Items can only be added, updated or
removed while their order is active. Breaking that rule is reported as
``NOT_AUTHORIZED``.

The one-active-order-per-user rule is checked by the caller with
:func:`list_user_orders` before :func:`create_order`; there is no database
constraint behind it.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from . import models
from .crud import commit
from .errors import bad_request, not_authorized, not_found
from .models import OrderStatus

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "The order with the given id was not found"
ORDER_NOT_ACTIVE = "Not authorized: the order is not active"
ITEM_NOT_FOUND = "The order item with the given id was not found"
PRODUCT_NOT_FOUND = "The product with the given id was not found"
ACTIVE_ORDER_EXISTS = "An active order already exists for this user"


def list_orders(db: Session) -> List[models.Order]:
    query = db.query(models.Order).options(selectinload(models.Order.items))
    return query.order_by(models.Order.user_id, models.Order.id).all()


def list_user_orders(db: Session, user_id: int, status: Optional[OrderStatus] = None) -> List[models.Order]:
    query = db.query(models.Order).options(selectinload(models.Order.items)).filter(models.Order.user_id == user_id)
    if status is not None:
        query = query.filter(models.Order.status == OrderStatus(status).value)
    return query.order_by(models.Order.status, models.Order.id).all()


def get_user_order(db: Session, user_id: int, order_id: int) -> Optional[models.Order]:
    return (
        db.query(models.Order)
        .filter(models.Order.id == order_id, models.Order.user_id == user_id)
        .first()
    )


def has_active_order(db: Session, user_id: int) -> bool:
    return bool(list_user_orders(db, user_id, status=OrderStatus.ACTIVE))


def create_order(db: Session, user_id: int) -> models.Order:
    if not db.get(models.User, user_id):
        raise not_found("The user with the given id was not found")
    order = models.Order(user_id=user_id, status=OrderStatus.ACTIVE.value)
    db.add(order)
    commit(db, f"Could not add the new order of user {user_id}")
    db.refresh(order)
    logger.info("order %s opened for user %s", order.id, user_id)
    return order


def get_active_order(db: Session, user_id: int, order_id: int) -> models.Order:
    """Load an order that may still be changed, or raise."""
    order = get_user_order(db, user_id, order_id)
    if not order:
        raise not_found(ORDER_NOT_FOUND)
    if not order.is_active:
        raise not_authorized(ORDER_NOT_ACTIVE)
    return order


def update_order(db: Session, user_id: int, order_id: int, status: OrderStatus) -> models.Order:
    order = get_active_order(db, user_id, order_id)
    if OrderStatus(status) is not OrderStatus.COMPLETE:
        raise bad_request("An active order can only be updated to the complete status")
    order.status = OrderStatus.COMPLETE.value
    commit(db, f"Could not update the order with id {order_id}")
    db.refresh(order)
    logger.info("order %s of user %s completed", order_id, user_id)
    return order


def _get_item(db: Session, order: models.Order, item_id: int) -> models.OrderItem:
    item = (
        db.query(models.OrderItem)
        .filter(models.OrderItem.id == item_id, models.OrderItem.order_id == order.id)
        .first()
    )
    if not item:
        raise not_found(ITEM_NOT_FOUND)
    return item


def add_item(db: Session, order: models.Order, product_id: int, quantity: int) -> models.OrderItem:
    if not order.is_active:
        raise not_authorized(ORDER_NOT_ACTIVE)
    if not db.get(models.Product, product_id):
        raise not_found(PRODUCT_NOT_FOUND)
    # a product already in the order is rejected by the uq_order_product constraint
    item = models.OrderItem(order_id=order.id, product_id=product_id, quantity=quantity)
    db.add(item)
    commit(db, f"Could not add the product id {product_id} to the order id {order.id}")
    db.refresh(item)
    return item


def update_item(db: Session, order: models.Order, item_id: int, product_id: int, quantity: int) -> models.OrderItem:
    if not order.is_active:
        raise not_authorized(ORDER_NOT_ACTIVE)
    item = _get_item(db, order, item_id)
    if item.product_id != product_id:
        raise bad_request("Mismatched product ids")
    item.quantity = quantity
    commit(db, f"Could not update the product id {product_id} in the order id {order.id}")
    db.refresh(item)
    return item


def remove_item(db: Session, order: models.Order, item_id: int) -> models.OrderItem:
    if not order.is_active:
        raise not_authorized(ORDER_NOT_ACTIVE)
    item = _get_item(db, order, item_id)
    if not db.get(models.Product, item.product_id):
        raise not_found(PRODUCT_NOT_FOUND)
    db.delete(item)
    commit(db, f"Could not delete the order item id {item_id} from the order id {order.id}")
    return item
