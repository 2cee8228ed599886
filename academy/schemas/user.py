# academy/schemas/user.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from academy.core.roles import Role
from academy.core.security_password import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from academy.schemas.common import CamelModel

# roles anyone may pick at signup; the rest are granted by an admin
SELF_SERVICE_ROLES = (Role.STUDENT, Role.PARENT, Role.GUEST)


class UserBase(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr


class SignupIn(UserBase):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    role: Role = Role.STUDENT


class LoginIn(CamelModel):
    email: EmailStr
    password: str


class RefreshIn(CamelModel):
    refresh_token: str


class UserCreate(UserBase):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    role: Role = Role.STUDENT
    bio: Optional[str] = None


class UserUpdate(CamelModel):
    name: Optional[str] = None
    role: Optional[Role] = None
    bio: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    bio: Optional[str] = None
    created_at: Optional[datetime] = None


class UserSummary(CamelModel):
    id: int
    name: str
    email: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserOut


class SessionOut(CamelModel):
    user: UserOut
    role: Role
    landing_route: str


class GuardOut(CamelModel):
    path: str
    allowed: bool
    redirect: Optional[str] = None
