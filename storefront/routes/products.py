from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import crud, schemas
from ..db import get_db
from ..errors import not_found
from ..guards import require_admin
from . import parse_id

router = APIRouter(prefix="/products", tags=["products"])

PRODUCT_NOT_FOUND = "The product with the given id was not found"


@router.get("", response_model=List[schemas.ProductRead])
def list_products(category_id: Optional[str] = Query(default=None, alias="categoryId"), db: Session = Depends(get_db)):
    cid = parse_id(category_id, "category") if category_id else None
    return crud.list_products(db, category_id=cid)


@router.get("/{product_id}", response_model=schemas.ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = crud.get_product(db, parse_id(product_id, "product"))
    if not product:
        raise not_found(PRODUCT_NOT_FOUND)
    return product


@router.post("", response_model=schemas.ProductRead, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: schemas.ProductInput, db: Session = Depends(get_db)):
    return crud.create_product(db, payload)


@router.put("/{product_id}", response_model=schemas.ProductRead, dependencies=[Depends(require_admin)])
def update_product(product_id: str, payload: schemas.ProductInput, db: Session = Depends(get_db)):
    pid = parse_id(product_id, "product")
    if not crud.get_product(db, pid):
        raise not_found(PRODUCT_NOT_FOUND)
    updated = crud.update_product(db, pid, payload)
    if not updated:
        raise not_found(PRODUCT_NOT_FOUND)
    return updated


@router.delete("/{product_id}", response_model=schemas.ProductRead, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, db: Session = Depends(get_db)):
    pid = parse_id(product_id, "product")
    if not crud.get_product(db, pid):
        raise not_found(PRODUCT_NOT_FOUND)
    deleted = crud.delete_product(db, pid)
    if not deleted:
        raise not_found(PRODUCT_NOT_FOUND)
    return deleted
