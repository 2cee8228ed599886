# academy/api/v1/registrations.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db
from academy.core.errors import Forbidden
from academy.core.roles import Role
from academy.models.user import User
from academy.schemas.enrollment import RegistrationCreate, RegistrationCreated
from academy.services import enrollment as enrollment_service
from academy.services.checkout import CheckoutProvider, get_checkout_provider

router = APIRouter()


@router.post("", response_model=RegistrationCreated, status_code=status.HTTP_201_CREATED)
def create_registration(
    body: RegistrationCreate,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    provider: CheckoutProvider = Depends(get_checkout_provider),
):
    if user.role is Role.GUEST:
        raise Forbidden("Guests cannot register for events")
    result = enrollment_service.register(db, provider, user, body.event_id, quantity=body.quantity,
                                         registration_type=body.registration_type,
                                         test=body.is_test_registration)
    if result.record is None:
        response.status_code = status.HTTP_200_OK
    message = result.message or "Complete payment to confirm your registration"
    return RegistrationCreated(message=message, registration=result.record, url=result.url)
