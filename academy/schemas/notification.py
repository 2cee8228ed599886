# academy/schemas/notification.py
from datetime import datetime
from typing import List, Optional

from academy.schemas.common import CamelModel


class NotificationOut(CamelModel):
    id: int
    type: str
    content: str
    sender_id: Optional[int] = None
    receiver_id: int
    related_id: Optional[int] = None
    read: bool
    created_at: Optional[datetime] = None


class NotificationList(CamelModel):
    notifications: List[NotificationOut]
    unread: int
