# academy/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from academy.api.deps import get_db, get_current_user, get_optional_user
from academy.core.errors import AppError, Forbidden, Unauthorized
from academy.core.roles import guard_path, landing_route
from academy.core.security_password import verify_and_maybe_upgrade
from academy.core.tokens import create_access_token, create_refresh_token, decode_refresh
from academy.crud.user import user_crud
from academy.models.user import User
from academy.schemas.user import (
    SELF_SERVICE_ROLES, GuardOut, LoginIn, RefreshIn, SessionOut, SignupIn, TokenPair, UserCreate, UserOut,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------- helpers ----------
def issue_tokens_for(user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(sub=user.email, role=user.role.value),
        refresh_token=create_refresh_token(sub=user.email),
        user=UserOut.model_validate(user),
    )


# ---------- endpoints ----------
@router.post("/auth/signup", response_model=TokenPair, status_code=status.HTTP_201_CREATED)
def signup(body: SignupIn, db: Session = Depends(get_db)):
    if body.role not in SELF_SERVICE_ROLES:
        raise Forbidden(f"Role '{body.role.value}' cannot be chosen at signup")
    if user_crud.get_by_email(db, body.email):
        raise AppError("An account with this email already exists", code="EMAIL_TAKEN", status_code=409)
    user = user_crud.create(db, UserCreate(name=body.name, email=body.email, password=body.password, role=body.role))
    logger.info("New %s account %s", user.role.value, user.id)
    return issue_tokens_for(user)


@router.post("/auth/login", response_model=TokenPair)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = user_crud.get_by_email(db, body.email)
    if not user:
        raise Unauthorized("Invalid credentials.")
    ok, new_hash = verify_and_maybe_upgrade(body.password, user.hashed_password)
    if not ok:
        raise Unauthorized("Invalid credentials.")
    if new_hash:
        user.hashed_password = new_hash
        db.add(user); db.commit()
    return issue_tokens_for(user)


@router.post("/auth/refresh", response_model=TokenPair)
def refresh(body: RefreshIn, db: Session = Depends(get_db)):
    payload = decode_refresh(body.refresh_token)
    if not payload:
        raise Unauthorized("Invalid refresh token")
    user = user_crud.get_by_email(db, payload["sub"])
    if not user:
        raise Unauthorized("Invalid refresh token")
    return issue_tokens_for(user)


@router.get("/auth/session", response_model=SessionOut)
def session(user: User = Depends(get_current_user)):
    return SessionOut(user=UserOut.model_validate(user), role=user.role, landing_route=landing_route(user.role))


@router.get("/navigation/guard", response_model=GuardOut)
def navigation_guard(path: str = Query(...), user: User | None = Depends(get_optional_user)):
    redirect = guard_path(path, user.role if user else None)
    return GuardOut(path=path, allowed=redirect is None, redirect=redirect)
