# academy/schemas/curriculum.py
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from academy.schemas.common import CamelModel


class CurriculumItemCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    content: Optional[str] = None
    type: str = Field(min_length=1, max_length=20)
    file_url: Optional[str] = None
    order: int = 0
    due_date: Optional[datetime] = None
    is_published: bool = False
    is_public: bool = False


class CurriculumItemOut(CurriculumItemCreate):
    id: int
    class_id: int


class CurriculumList(CamelModel):
    items: List[CurriculumItemOut]


class PartitionedCurriculum(CamelModel):
    lectures: List[CurriculumItemOut] = []
    readings: List[CurriculumItemOut] = []
    videos: List[CurriculumItemOut] = []
    assignments: List[CurriculumItemOut] = []
