# academy/api/v1/events.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from academy.api.deps import get_db, get_optional_user
from academy.core.roles import is_admin
from academy.crud.offering import event_crud
from academy.models.user import User
from academy.schemas.offering import EventOut
from academy.schemas.state import EnrollmentStateOut
from academy.services.enrollment import event_view

router = APIRouter()


@router.get("", response_model=List[EventOut])
def list_events(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    active_only = not (include_inactive and user is not None and is_admin(user.role))
    return event_crud.list(db, active_only=active_only)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    return event_crud.get_or_404(db, event_id)


@router.get("/{event_id}/registration-state", response_model=EnrollmentStateOut)
def registration_state(
    event_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    event = event_crud.get_or_404(db, event_id)
    return EnrollmentStateOut.from_view(event_view(db, event, user))
