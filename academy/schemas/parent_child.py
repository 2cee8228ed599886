# academy/schemas/parent_child.py
from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr

from academy.models.parent_child import RelationshipStatus
from academy.schemas.common import CamelModel
from academy.schemas.user import UserSummary


class ParentChildCreate(CamelModel):
    child_email: EmailStr


class ParentChildUpdate(CamelModel):
    relationship_id: int
    status: RelationshipStatus


class ParentChildOut(CamelModel):
    id: int
    parent_id: int
    child_id: int
    status: RelationshipStatus
    created_at: Optional[datetime] = None
    parent: Optional[UserSummary] = None
    child: Optional[UserSummary] = None


class RelationshipList(CamelModel):
    relationships: List[ParentChildOut]
