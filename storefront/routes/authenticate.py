from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..auth import TokenService
from ..config import Settings
from ..db import get_db
from ..errors import ErrorKind, ServiceError
from ..guards import get_token_service
from . import get_settings

router = APIRouter(prefix="/authenticate", tags=["authentication"])


@router.post("", response_model=schemas.AuthenticationResult)
def login(
    credentials: schemas.Credentials,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
):
    user = crud.authenticate(db, credentials, settings.password_pepper)
    if not user:
        raise ServiceError(ErrorKind.UNAUTHENTICATED, "Authentication failed")
    return schemas.AuthenticationResult(token=tokens.issue(user), user=schemas.UserRead.model_validate(user))
