from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import FrozenSet, Optional
import logging, os

from dotenv import load_dotenv
from fastapi import Depends, Header, Request
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from api.db.database import get_db, fits_id
from api.utils.exceptions import AuthorizationError
from api.v1.models.user import User, Role

load_dotenv(".env")

SECRET_KEY = os.getenv("SECRET", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as seen by routes and services."""

    user_id: int
    nickname: str
    role: Role
    authorities: FrozenSet[str]


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def resolve_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()
        return token or None
    return None


def to_principal(user: User) -> Principal:
    return Principal(
        user_id=user.user_id,
        nickname=user.nickname,
        role=user.role,
        authorities=frozenset({user.role.value.upper()}),
    )


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    token = resolve_token(authorization)
    if token is None:
        logger.warning(f"Rejected {request.url.path}: missing or malformed bearer token")
        raise AuthorizationError("Forbidden : Invalid Token")

    payload = decode_access_token(token)
    if not payload:
        logger.warning(f"Rejected {request.url.path}: token failed verification")
        raise AuthorizationError("Forbidden : Invalid Token")

    user_id = payload.get("id")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not fits_id(user_id):
        raise AuthorizationError("Forbidden : Invalid Token")

    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        logger.warning(f"Rejected {request.url.path}: token subject {user_id} does not exist")
        raise AuthorizationError("Forbidden : Invalid Token")
    if user.is_banned:
        logger.warning(f"Rejected {request.url.path}: user '{user.nickname}' is banned")
        raise AuthorizationError("Forbidden : User is banned")

    request.state.principal = to_principal(user)
    return user
