# academy/api/deps.py
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from academy.core.errors import Unauthorized
from academy.core.tokens import decode_access
from academy.crud.user import user_crud
from academy.db.session import get_db
from academy.models.user import User

__all__ = ["get_db", "get_bearer_token", "get_current_user", "get_optional_user"]


# ----------------------------------------------------------------------
# Reads the Bearer token from the Authorization header
# ----------------------------------------------------------------------
def _parse_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def get_bearer_token(authorization: Optional[str] = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise Unauthorized("Missing Authorization header")
    token = _parse_bearer(authorization)
    if not token:
        raise Unauthorized("Invalid Authorization header")
    return token


def _user_from_token(db: Session, token: Optional[str]) -> Optional[User]:
    payload = decode_access(token) if token else None
    if not payload:
        return None
    return user_crud.get_by_email(db, payload["sub"])


# ----------------------------------------------------------------------
# Current user; tokens for deleted accounts are rejected
# ----------------------------------------------------------------------
def get_current_user(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)) -> User:
    user = _user_from_token(db, token)
    if user is None:
        raise Unauthorized("Invalid or expired token")
    return user


def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but a missing or unusable token means no session."""
    return _user_from_token(db, _parse_bearer(authorization))
