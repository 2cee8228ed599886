# academy/schemas/offering.py
from datetime import datetime
from typing import Optional
from pydantic import Field

from academy.schemas.common import CamelModel
from academy.schemas.user import UserSummary


class ClassBase(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    capacity: int = Field(default=20, ge=1)
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    schedule: Optional[str] = None
    instructor_id: Optional[int] = None


class ClassCreate(ClassBase):
    pass


class ClassUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    schedule: Optional[str] = None
    instructor_id: Optional[int] = None


class ClassOut(ClassBase):
    id: int
    current_count: int
    instructor: Optional[UserSummary] = None


class ClassSummary(CamelModel):
    id: int
    title: str
    price: Optional[float] = None
    start_date: Optional[datetime] = None
    location: Optional[str] = None


class EventBase(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    capacity: int = Field(default=100, ge=1)
    is_active: bool = True
    date: Optional[datetime] = None
    location: Optional[str] = None


class EventCreate(EventBase):
    pass


class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None
    date: Optional[datetime] = None
    location: Optional[str] = None


class EventOut(EventBase):
    id: int
    current_count: int


class EventSummary(CamelModel):
    id: int
    title: str
    price: Optional[float] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
