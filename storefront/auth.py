import time
from typing import List, NamedTuple, Optional

import jwt
from passlib.context import CryptContext

from .config import ONE_DAY_SECONDS, Settings
from .errors import ErrorKind, ServiceError

# Use pbkdf2_sha256 as default to avoid bcrypt 72-byte limitation in some envs
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

ADMIN_ROLE = "admin"


def hash_password(password: str, pepper: str = "") -> str:
    return pwd_context.hash(f"{password}{pepper}")


def verify_password(plain: str, hashed: str, pepper: str = "") -> bool:
    return pwd_context.verify(f"{plain}{pepper}", hashed)


class TokenClaims(NamedTuple):
    user_id: Optional[int]
    roles: List[str]
    permissions: List[str]
    subject: Optional[str]
    expires_at: int

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles


class TokenService:
    """Issues and verifies the bearer tokens handed out by /authenticate."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: int = ONE_DAY_SECONDS):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.token_expires_seconds)

    def issue(self, user, expires_in: Optional[int] = None) -> str:
        now = int(time.time())
        exp = now + (self.expires_in if expires_in is None else expires_in)
        roles = [ADMIN_ROLE] if user.is_admin else []
        payload = {
            "userId": user.id,
            "roles": roles,
            "permissions": [],
            "sub": user.email or "",
            "iat": now,
            "exp": exp,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise ServiceError(ErrorKind.UNAUTHENTICATED, str(e) or "Not authenticated") from e
        roles = payload.get("roles")
        permissions = payload.get("permissions")
        user_id = payload.get("userId")
        return TokenClaims(
            user_id=user_id if isinstance(user_id, int) and not isinstance(user_id, bool) else None,
            roles=list(roles) if isinstance(roles, list) else [],
            permissions=list(permissions) if isinstance(permissions, list) else [],
            subject=payload.get("sub"),
            expires_at=payload.get("exp", 0),
        )
