# academy/api/v1/parent_child.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db
from academy.api.permissions import require_roles
from academy.core.errors import AppError, Forbidden, NotFound
from academy.core.roles import Role
from academy.crud.user import user_crud
from academy.models.parent_child import ParentChild, RelationshipStatus
from academy.models.user import User
from academy.schemas.common import Message
from academy.schemas.parent_child import ParentChildCreate, ParentChildOut, ParentChildUpdate, RelationshipList
from academy.services import notifications

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/parent-child", response_model=RelationshipList)
def list_relationships(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    stmt = select(ParentChild).order_by(ParentChild.id.desc())
    if user.role is Role.PARENT:
        stmt = stmt.where(ParentChild.parent_id == user.id)
    elif user.role is Role.STUDENT:
        stmt = stmt.where(ParentChild.child_id == user.id)
    else:
        stmt = stmt.where(or_(ParentChild.parent_id == user.id, ParentChild.child_id == user.id))
    return RelationshipList(relationships=[ParentChildOut.model_validate(r) for r in db.scalars(stmt)])


@router.post("/parent-child", response_model=ParentChildOut, status_code=status.HTTP_201_CREATED)
def request_relationship(
    body: ParentChildCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_roles([Role.PARENT])),
):
    child = user_crud.get_by_email(db, body.child_email)
    if not child or child.id == user.id:
        raise NotFound("Child not found with the provided email")
    exists = db.scalar(select(ParentChild).where(ParentChild.parent_id == user.id, ParentChild.child_id == child.id))
    if exists:
        raise AppError("Relationship already exists", code="RELATIONSHIP_EXISTS")

    link = ParentChild(parent_id=user.id, child_id=child.id, status=RelationshipStatus.PENDING)
    db.add(link); db.flush()
    notifications.notify(db, receiver_id=child.id, sender_id=user.id, related_id=link.id,
                         type=notifications.PARENT_REQUEST,
                         content=f"{user.name} wants to connect with you as your parent")
    db.commit(); db.refresh(link)
    logger.info("Parent %s requested link with %s", user.id, child.id)
    return link


@router.patch("/parent-child", response_model=ParentChildOut)
def respond_to_relationship(
    body: ParentChildUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if body.status not in (RelationshipStatus.APPROVED, RelationshipStatus.REJECTED):
        raise AppError("Status must be APPROVED or REJECTED", code="INVALID_STATUS")
    link = db.get(ParentChild, body.relationship_id)
    if link is None:
        raise NotFound("Relationship not found")
    if link.child_id != user.id:
        raise Forbidden("Only the child can respond to this request")

    link.status = body.status
    verb = "accepted" if body.status is RelationshipStatus.APPROVED else "declined"
    notifications.notify(db, receiver_id=link.parent_id, sender_id=user.id, related_id=link.id,
                         type=notifications.PARENT_REQUEST_RESPONSE,
                         content=f"{user.name} {verb} your parent request")
    db.add(link); db.commit(); db.refresh(link)
    return link


@router.delete("/parent-child", response_model=Message)
def delete_relationship(
    relationship_id: int = Query(..., alias="id"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    link = db.get(ParentChild, relationship_id)
    if link is None:
        raise NotFound("Relationship not found")
    if user.id not in (link.parent_id, link.child_id):
        raise Forbidden("You are not part of this relationship")

    other = link.child_id if user.id == link.parent_id else link.parent_id
    notifications.notify(db, receiver_id=other, sender_id=user.id, related_id=link.id,
                         type=notifications.PARENT_RELATIONSHIP_DELETED,
                         content=f"{user.name} removed your parent-child connection")
    db.delete(link); db.commit()
    return Message(message="Relationship deleted")


@router.get("/student/parent-requests", response_model=RelationshipList)
def pending_parent_requests(db: Session = Depends(get_db), user: User = Depends(require_roles([Role.STUDENT]))):
    rows = db.scalars(
        select(ParentChild)
        .where(ParentChild.child_id == user.id, ParentChild.status == RelationshipStatus.PENDING)
        .order_by(ParentChild.id.desc())
    )
    return RelationshipList(relationships=[ParentChildOut.model_validate(r) for r in rows])
