from datetime import datetime
from typing import List, Optional
from pydantic import Field

from academy.schemas.common import CamelModel


class AnnouncementCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)


class AnnouncementOut(CamelModel):
    id: int
    class_id: int
    title: str
    content: str
    author: str
    created_at: Optional[datetime] = None


class AnnouncementList(CamelModel):
    announcements: List[AnnouncementOut]
