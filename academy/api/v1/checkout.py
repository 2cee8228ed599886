# academy/api/v1/checkout.py
from __future__ import annotations
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db
from academy.core.config import settings
from academy.core.errors import AppError, Forbidden
from academy.core.roles import Role
from academy.crud.offering import class_crud, event_crud
from academy.models.user import User
from academy.schemas.checkout import CheckoutRequest, CheckoutResponse, WebhookEvent
from academy.services import enrollment as enrollment_service
from academy.services.checkout import CheckoutProvider, get_checkout_provider, verify_signature

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "X-Checkout-Signature"


@router.post("/create-checkout-session", response_model=CheckoutResponse, response_model_exclude_none=True)
def create_checkout_session(
    body: CheckoutRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    provider: CheckoutProvider = Depends(get_checkout_provider),
):
    if body.class_id is not None:
        cls = class_crud.get_or_404(db, body.class_id)
        enrollee = enrollment_service.resolve_enrollee(db, user, body.child_id)
        result = enrollment_service.checkout_class(db, provider, user, cls, enrollee)
    else:
        if user.role is Role.GUEST:
            raise Forbidden("Guests cannot register for events")
        event = event_crud.get_or_404(db, body.event_id)
        result = enrollment_service.checkout_event(db, provider, user, event, body.quantity, body.registration_type)

    if result.url:
        return CheckoutResponse(url=result.url, message=result.message)
    return CheckoutResponse(session_id=result.session_id, message=result.message)


@router.post("/webhooks/checkout")
async def checkout_webhook(
    request: Request,
    signature: Optional[str] = Header(None, alias=SIGNATURE_HEADER),
    db: Session = Depends(get_db),
):
    raw = await request.body()
    if not settings.CHECKOUT_WEBHOOK_SECRET:
        logger.warning("Webhook received but no webhook secret is configured")
    if not verify_signature(raw, signature, settings.CHECKOUT_WEBHOOK_SECRET):
        logger.warning("Rejected checkout webhook with a bad signature")
        raise AppError("Invalid webhook signature", code="INVALID_SIGNATURE")
    try:
        event = WebhookEvent.model_validate(json.loads(raw))
    except ValueError:
        raise AppError("Malformed webhook payload", code="INVALID_PAYLOAD")
    return enrollment_service.handle_checkout_event(db, event.type, event.data)
