from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from .. import crud, schemas
from ..db import get_db
from ..errors import not_found
from ..guards import require_admin
from . import parse_id

router = APIRouter(prefix="/categories", tags=["categories"])

CATEGORY_NOT_FOUND = "The category with the given id was not found"


@router.get("", response_model=List[schemas.CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return crud.list_categories(db)


@router.get("/{category_id}", response_model=schemas.CategoryRead)
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = crud.get_category(db, parse_id(category_id, "category"))
    if not category:
        raise not_found(CATEGORY_NOT_FOUND)
    return category


@router.post("", response_model=schemas.CategoryRead, status_code=201, dependencies=[Depends(require_admin)])
def create_category(payload: schemas.CategoryInput, db: Session = Depends(get_db)):
    return crud.create_category(db, payload)


@router.put("/{category_id}", response_model=schemas.CategoryRead, dependencies=[Depends(require_admin)])
def update_category(category_id: str, payload: schemas.CategoryInput, db: Session = Depends(get_db)):
    cid = parse_id(category_id, "category")
    if not crud.get_category(db, cid):
        raise not_found(CATEGORY_NOT_FOUND)
    updated = crud.update_category(db, cid, payload)
    if not updated:
        raise not_found(CATEGORY_NOT_FOUND)
    return updated


@router.delete("/{category_id}", response_model=schemas.CategoryRead, dependencies=[Depends(require_admin)])
def delete_category(category_id: str, db: Session = Depends(get_db)):
    cid = parse_id(category_id, "category")
    if not crud.get_category(db, cid):
        raise not_found(CATEGORY_NOT_FOUND)
    deleted = crud.delete_category(db, cid)
    if not deleted:
        raise not_found(CATEGORY_NOT_FOUND)
    return deleted
