# academy/api/v1/notifications.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db
from academy.core.errors import NotFound
from academy.models.notification import Notification
from academy.models.user import User
from academy.schemas.notification import NotificationList, NotificationOut

router = APIRouter()


@router.get("/notifications", response_model=NotificationList)
def list_notifications(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    rows = db.scalars(select(Notification).where(Notification.receiver_id == user.id)
                      .order_by(Notification.id.desc()).limit(100))
    unread = db.scalar(select(func.count()).select_from(Notification)
                       .where(Notification.receiver_id == user.id, Notification.read.is_(False))) or 0
    return NotificationList(notifications=[NotificationOut.model_validate(n) for n in rows], unread=unread)


@router.patch("/notifications/{notification_id}", response_model=NotificationOut)
def mark_read(notification_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    note = db.get(Notification, notification_id)
    if note is None or note.receiver_id != user.id:
        raise NotFound("Notification not found")
    note.read = True
    db.add(note); db.commit(); db.refresh(note)
    return note
