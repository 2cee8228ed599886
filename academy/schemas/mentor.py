from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from academy.core.security_password import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from academy.schemas.common import CamelModel
from academy.schemas.user import UserOut


class MentorProfileIn(CamelModel):
    bio: str = Field(min_length=1, max_length=5000)
    specialization: str = Field(min_length=1, max_length=200)
    experience: int = Field(ge=0, le=80)
    education: Optional[str] = None
    certifications: Optional[str] = None
    availability: Optional[str] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)


class MentorProfileOut(MentorProfileIn):
    id: int
    user_id: int
    created_at: Optional[datetime] = None


class MentorCreate(MentorProfileIn):
    """New MENTOR account plus its profile, created by staff."""
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)


class MentorOut(UserOut):
    mentor_profile: Optional[MentorProfileOut] = None
