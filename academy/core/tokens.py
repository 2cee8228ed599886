# academy/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from academy.core.config import settings


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(payload: Dict[str, Any], expires_at: datetime) -> str:
    payload = {
        **payload,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(*, sub: str, role: str) -> str:
    """Short-lived access token; sub is the user's e-mail."""
    expires = _now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode({"type": "access", "sub": sub, "role": role}, expires)


def create_refresh_token(*, sub: str) -> str:
    expires = _now() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode({"type": "refresh", "sub": sub}, expires)


def _decode(token: str, expected_type: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != expected_type:
        return None
    if not payload.get("sub") or not payload.get("jti"):
        return None
    return payload


def decode_access(token: str) -> Optional[Dict[str, Any]]:
    return _decode(token, "access")


def decode_refresh(token: str) -> Optional[Dict[str, Any]]:
    return _decode(token, "refresh")
