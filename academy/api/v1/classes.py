# academy/api/v1/classes.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db, get_optional_user
from academy.api.permissions import require_permission
from academy.core.errors import Forbidden, NotFound
from academy.core.permissions import has_permission
from academy.core.roles import Role, is_admin
from academy.crud.enrollment import enrollment_crud
from academy.crud.offering import class_crud
from academy.models.class_ import Class
from academy.models.announcement import ClassAnnouncement
from academy.models.curriculum import CurriculumItem
from academy.models.enrollment import Enrollment, SEATED_STATUSES
from academy.models.user import User
from academy.schemas.announcement import AnnouncementCreate, AnnouncementList, AnnouncementOut
from academy.schemas.common import Message
from academy.schemas.curriculum import CurriculumItemCreate, CurriculumItemOut, CurriculumList, PartitionedCurriculum
from academy.schemas.offering import ClassOut
from academy.schemas.state import EnrollmentStateOut
from academy.services import notifications
from academy.services.curriculum import partition_curriculum
from academy.services.enrollment import approved_link, class_view

router = APIRouter()

CLASS_STAFF_ROLES = frozenset({Role.ADMIN, Role.T1_ADMIN, Role.T2_ADMIN, Role.T3_MANAGER})


def _is_seated(db: Session, user_id: int, class_id: int) -> bool:
    enr = enrollment_crud.active_for(db, user_id=user_id, class_id=class_id)
    return enr is not None and enr.status in SEATED_STATUSES


def can_view_class_content(db: Session, user: User, cls: Class, child_id: Optional[int] = None) -> bool:
    if user.role in CLASS_STAFF_ROLES or cls.instructor_id == user.id:
        return True
    if _is_seated(db, user.id, cls.id):
        return True
    if child_id is not None and user.role is Role.PARENT:
        return (approved_link(db, parent_id=user.id, child_id=child_id) is not None
                and _is_seated(db, child_id, cls.id))
    return False


def _published(db: Session, class_id: int, public_only: bool = False) -> List[CurriculumItem]:
    stmt = (
        select(CurriculumItem)
        .where(CurriculumItem.class_id == class_id, CurriculumItem.is_published.is_(True))
        .order_by(CurriculumItem.order, CurriculumItem.id)
    )
    if public_only:
        stmt = stmt.where(CurriculumItem.is_public.is_(True))
    return list(db.scalars(stmt))


@router.get("", response_model=List[ClassOut])
def list_classes(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    active_only = not (include_inactive and user is not None and is_admin(user.role))
    return class_crud.list(db, active_only=active_only)


@router.get("/{class_id}", response_model=ClassOut)
def get_class(class_id: int, db: Session = Depends(get_db)):
    return class_crud.get_or_404(db, class_id)


@router.get("/{class_id}/enrollment-state", response_model=EnrollmentStateOut)
def enrollment_state(
    class_id: int,
    child_id: Optional[int] = Query(None, alias="childId"),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Class and viewer's enrollment resolved in one query; see services.reconciler."""
    cls = class_crud.get_or_404(db, class_id)
    return EnrollmentStateOut.from_view(class_view(db, cls, user, child_id))


@router.get("/{class_id}/curriculum", response_model=CurriculumList)
def get_curriculum(
    class_id: int,
    child_id: Optional[int] = Query(None, alias="childId"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cls = class_crud.get_or_404(db, class_id)
    if not can_view_class_content(db, user, cls, child_id):
        raise Forbidden("You do not have access to this class's curriculum")
    return CurriculumList(items=[CurriculumItemOut.model_validate(i) for i in _published(db, cls.id)])


@router.get("/{class_id}/curriculum/public", response_model=PartitionedCurriculum)
def get_public_curriculum(class_id: int, db: Session = Depends(get_db)):
    cls = class_crud.get_or_404(db, class_id)
    items = [CurriculumItemOut.model_validate(i) for i in _published(db, cls.id, public_only=True)]
    return PartitionedCurriculum(**partition_curriculum(items, public_only=True))


@router.post("/{class_id}/curriculum", response_model=CurriculumItemOut, status_code=status.HTTP_201_CREATED)
def add_curriculum_item(
    class_id: int,
    body: CurriculumItemCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cls = class_crud.get_or_404(db, class_id)
    if cls.instructor_id != user.id and not has_permission(user.role, "curriculum", "create"):
        raise Forbidden("Only the instructor or curriculum staff can add materials")
    item = CurriculumItem(class_id=cls.id, **body.model_dump())
    item.type = item.type.upper()
    db.add(item); db.commit(); db.refresh(item)
    return item


@router.delete("/{class_id}/curriculum/{item_id}", response_model=Message,
               dependencies=[Depends(require_permission("curriculum", "delete"))])
def delete_curriculum_item(class_id: int, item_id: int, db: Session = Depends(get_db)):
    item = db.get(CurriculumItem, item_id)
    if item is None or item.class_id != class_id:
        raise NotFound("Curriculum item not found")
    db.delete(item); db.commit()
    return Message(message="Curriculum item deleted")


# ---------------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------------
@router.get("/{class_id}/announcements", response_model=AnnouncementList)
def list_announcements(
    class_id: int,
    child_id: Optional[int] = Query(None, alias="childId"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cls = class_crud.get_or_404(db, class_id)
    if not can_view_class_content(db, user, cls, child_id):
        raise Forbidden("You are not enrolled in this class")
    rows = db.scalars(select(ClassAnnouncement).where(ClassAnnouncement.class_id == cls.id)
                      .order_by(ClassAnnouncement.created_at.desc(), ClassAnnouncement.id.desc()))
    return AnnouncementList(announcements=[AnnouncementOut.model_validate(a) for a in rows])


@router.post("/{class_id}/announcements", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def post_announcement(
    class_id: int,
    body: AnnouncementCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cls = class_crud.get_or_404(db, class_id)
    if not (user.role in CLASS_STAFF_ROLES or cls.instructor_id == user.id
            or has_permission(user.role, "announcements", "create")):
        raise Forbidden("Only instructors can add announcements")
    note = ClassAnnouncement(class_id=cls.id, user_id=user.id, title=body.title, content=body.content)
    db.add(note); db.flush()

    seated = db.scalars(select(Enrollment.user_id).where(
        Enrollment.class_id == cls.id, Enrollment.status.in_(SEATED_STATUSES)).distinct())
    for receiver_id in seated:
        notifications.notify(db, receiver_id=receiver_id, sender_id=user.id, related_id=note.id,
                             type=notifications.ANNOUNCEMENT, content=f"New announcement in class: {body.title}")
    db.commit(); db.refresh(note)
    return note
