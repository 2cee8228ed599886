# academy/api/v1/mentors.py
"""Mentor directory, staff-created mentor accounts and the mentor's own profile."""
from __future__ import annotations
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.api.deps import get_db
from academy.api.permissions import require_roles
from academy.core.errors import AppError, NotFound
from academy.core.permissions import ADMIN_PANEL_ROLES
from academy.core.roles import Role
from academy.core.security_password import hash_password
from academy.crud.user import normalize_email, user_crud
from academy.models.mentor_profile import MentorProfile
from academy.models.user import User
from academy.schemas.mentor import MentorCreate, MentorOut, MentorProfileIn, MentorProfileOut

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_FIELDS = set(MentorProfileIn.model_fields)


@router.get("", response_model=List[MentorOut])
def list_mentors(db: Session = Depends(get_db)):
    stmt = select(User).where(User.role.in_([Role.MENTOR, Role.INSTRUCTOR])).order_by(User.name)
    return list(db.scalars(stmt))


@router.post("", response_model=MentorOut, status_code=status.HTTP_201_CREATED)
def create_mentor(
    body: MentorCreate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_roles(ADMIN_PANEL_ROLES)),
):
    if user_crud.get_by_email(db, body.email):
        raise AppError("An account with this email already exists", code="EMAIL_TAKEN", status_code=409)
    user = User(
        name=body.name,
        email=normalize_email(body.email),
        hashed_password=hash_password(body.password),
        role=Role.MENTOR,
    )
    user.mentor_profile = MentorProfile(**body.model_dump(include=PROFILE_FIELDS))
    db.add(user); db.commit(); db.refresh(user)
    logger.info("Mentor %s created by user %s", user.id, staff.id)
    return user


# ---------- the signed-in mentor's profile ----------
@router.get("/profile", response_model=MentorProfileOut)
def get_my_profile(user: User = Depends(require_roles([Role.MENTOR]))):
    if user.mentor_profile is None:
        raise NotFound("Mentor profile not found")
    return user.mentor_profile


@router.put("/profile", response_model=MentorProfileOut)
def put_my_profile(
    body: MentorProfileIn,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles([Role.MENTOR])),
):
    profile = user.mentor_profile
    if profile is None:
        profile = MentorProfile(user_id=user.id)
    for field, value in body.model_dump().items():
        setattr(profile, field, value)
    db.add(profile); db.commit(); db.refresh(profile)
    return profile
