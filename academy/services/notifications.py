# academy/services/notifications.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from academy.models.notification import Notification

logger = logging.getLogger(__name__)

CLASS_ENROLLMENT = "CLASS_ENROLLMENT"
CLASS_UNENROLLMENT = "CLASS_UNENROLLMENT"
PARENT_REQUEST = "PARENT_REQUEST"
PARENT_REQUEST_RESPONSE = "PARENT_REQUEST_RESPONSE"
PARENT_RELATIONSHIP_DELETED = "PARENT_RELATIONSHIP_DELETED"
ANNOUNCEMENT = "ANNOUNCEMENT"


def notify(db: Session, *, receiver_id: int, type: str, content: str,
           sender_id: Optional[int] = None, related_id: Optional[int] = None) -> Notification:
    """Queues a notification on the session; the caller commits."""
    note = Notification(type=type, content=content[:500], sender_id=sender_id,
                        receiver_id=receiver_id, related_id=related_id, read=False)
    db.add(note)
    logger.debug("Notification %s -> user %s", type, receiver_id)
    return note
