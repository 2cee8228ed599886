# academy/schemas/checkout.py
from typing import Any, Dict, Optional
from pydantic import Field, model_validator

from academy.schemas.common import CamelModel


class CheckoutRequest(CamelModel):
    class_id: Optional[int] = None
    event_id: Optional[int] = None
    # pays for an approved child's class enrollment instead of the caller's own
    child_id: Optional[int] = None
    quantity: int = Field(default=1, ge=1)
    registration_type: str = "individual"

    @model_validator(mode="after")
    def _one_target(self):
        if self.class_id is None and self.event_id is None:
            raise ValueError("Either classId or eventId is required")
        return self


class CheckoutResponse(CamelModel):
    url: Optional[str] = None
    session_id: Optional[str] = None
    message: Optional[str] = None


class WebhookEvent(CamelModel):
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
