# academy/schemas/state.py
from typing import List, Optional

from academy.models.enrollment import EnrollmentStatus
from academy.services.reconciler import Action, EnrollmentView, ViewState
from academy.schemas.common import CamelModel


class EnrollButtonOut(CamelModel):
    label: str
    disabled: bool
    action: Optional[Action] = None


class EnrollmentStateOut(CamelModel):
    state: ViewState
    actions: List[Action]
    enroll_button: Optional[EnrollButtonOut] = None
    message: Optional[str] = None
    sign_in_url: Optional[str] = None
    registration_id: Optional[int] = None
    registration_status: Optional[EnrollmentStatus] = None
    is_test: bool = False

    @classmethod
    def from_view(cls, view: EnrollmentView) -> "EnrollmentStateOut":
        button = view.enroll_button
        return cls(
            state=view.state,
            actions=list(view.actions),
            enroll_button=EnrollButtonOut(label=button.label, disabled=button.disabled, action=button.action)
            if button else None,
            message=view.message,
            sign_in_url=view.sign_in_url,
            registration_id=view.registration_id,
            registration_status=view.registration_status,
            is_test=view.is_test,
        )
