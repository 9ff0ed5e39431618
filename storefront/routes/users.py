from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from .. import crud, schemas
from ..config import Settings
from ..db import get_db
from ..errors import not_found
from ..guards import require_admin, require_current_user
from . import get_settings, parse_id

router = APIRouter(prefix="/users", tags=["users"])

USER_NOT_FOUND = "The user with the given id was not found"


@router.get("", response_model=List[schemas.UserRead], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return crud.list_users(db)


@router.post("", response_model=schemas.UserRead, status_code=201)
def create_user(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return crud.create_user(db, user, settings.password_pepper)


@router.get("/{user_id}", response_model=schemas.UserRead, dependencies=[Depends(require_current_user)])
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = crud.get_user(db, parse_id(user_id, "user"))
    if not user:
        raise not_found(USER_NOT_FOUND)
    return user


@router.put("/{user_id}", response_model=schemas.UserRead, dependencies=[Depends(require_current_user)])
def update_user(user_id: str, payload: schemas.UserUpdate, db: Session = Depends(get_db)):
    uid = parse_id(user_id, "user")
    if not crud.get_user(db, uid):
        raise not_found(USER_NOT_FOUND)
    updated = crud.update_user(db, uid, payload)
    if not updated:
        raise not_found(USER_NOT_FOUND)
    return updated


@router.delete("/{user_id}", response_model=schemas.UserRead, dependencies=[Depends(require_admin)])
def delete_user(user_id: str, db: Session = Depends(get_db)):
    uid = parse_id(user_id, "user")
    if not crud.get_user(db, uid):
        raise not_found(USER_NOT_FOUND)
    deleted = crud.delete_user(db, uid)
    if not deleted:
        raise not_found(USER_NOT_FOUND)
    return deleted
