import logging
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from . import models, schemas
from .auth import hash_password, verify_password
from .errors import ErrorKind, ServiceError, bad_request

logger = logging.getLogger(__name__)

# Business rule: prices stored rounded to 2 decimals, strictly positive

def round_amount(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def commit(db: Session, message: str) -> None:
    """Commit the session, turning any database failure into an internal error."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s: %s", message, e)
        raise ServiceError(ErrorKind.INTERNAL, message, details=str(e)) from e


# -------------------- Categories --------------------

def list_categories(db: Session) -> List[models.Category]:
    return db.query(models.Category).order_by(models.Category.id).all()


def get_category(db: Session, category_id: int) -> Optional[models.Category]:
    return db.get(models.Category, category_id)


def create_category(db: Session, data: schemas.CategoryInput) -> models.Category:
    category = models.Category(name=data.name)
    db.add(category)
    commit(db, "Could not add the new category")
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, data: schemas.CategoryInput) -> Optional[models.Category]:
    category = db.get(models.Category, category_id)
    if not category:
        return None
    category.name = data.name
    commit(db, f"Could not update the category with id {category_id}")
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> Optional[models.Category]:
    category = db.get(models.Category, category_id)
    if not category:
        return None
    db.delete(category)
    commit(db, f"Could not delete the category with id {category_id}")
    return category


# -------------------- Products --------------------

def list_products(db: Session, category_id: Optional[int] = None) -> List[models.Product]:
    query = db.query(models.Product)
    if category_id is not None:
        query = query.filter(models.Product.category_id == category_id)
    return query.order_by(models.Product.id).all()


def get_product(db: Session, product_id: int) -> Optional[models.Product]:
    return db.get(models.Product, product_id)


def _checked_product_fields(db: Session, data: schemas.ProductInput) -> dict:
    price = round_amount(data.price)
    if price <= 0:
        raise bad_request('"price" must be a positive number')
    if not db.get(models.Category, data.category_id):
        raise bad_request(f"The category with id {data.category_id} does not exist")
    return {
        "name": data.name,
        "price": price,
        "category_id": data.category_id,
        "image_url": data.image_url or None,
    }


def create_product(db: Session, data: schemas.ProductInput) -> models.Product:
    product = models.Product(**_checked_product_fields(db, data))
    db.add(product)
    commit(db, "Could not add the new product")
    db.refresh(product)
    return product


def update_product(db: Session, product_id: int, data: schemas.ProductInput) -> Optional[models.Product]:
    product = db.get(models.Product, product_id)
    if not product:
        return None
    for field, value in _checked_product_fields(db, data).items():
        setattr(product, field, value)
    commit(db, f"Could not update the product with id {product_id}")
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> Optional[models.Product]:
    product = db.get(models.Product, product_id)
    if not product:
        return None
    db.delete(product)
    commit(db, f"Could not delete the product with id {product_id}")
    return product


# -------------------- Users --------------------

def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(models.User.id).all()


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.get(models.User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def create_user(db: Session, user: schemas.UserCreate, pepper: str = "") -> models.User:
    # pre-check only; the unique index still rejects a concurrent duplicate
    if get_user_by_email(db, user.email):
        raise bad_request("A user with the given email already exists")
    db_user = models.User(
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        is_admin=False,
        password_hash=hash_password(user.password, pepper),
    )
    db.add(db_user)
    commit(db, f"Could not add the new user {user.first_name} {user.last_name}")
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user_id: int, data: schemas.UserUpdate) -> Optional[models.User]:
    user = db.get(models.User, user_id)
    if not user:
        return None
    owner = get_user_by_email(db, data.email)
    if owner and owner.id != user.id:
        raise bad_request("A user with the given email already exists")
    user.first_name = data.first_name
    user.last_name = data.last_name
    user.email = data.email
    commit(db, f"Could not update the user {user_id}")
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> Optional[models.User]:
    user = db.get(models.User, user_id)
    if not user:
        return None
    db.delete(user)
    commit(db, f"Could not delete the user {user_id}")
    return user


def authenticate(db: Session, credentials: schemas.Credentials, pepper: str = "") -> Optional[models.User]:
    user = get_user_by_email(db, credentials.email)
    if not user or not user.password_hash:
        return None
    if not verify_password(credentials.password, user.password_hash, pepper):
        return None
    return user
