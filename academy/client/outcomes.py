# academy/client/outcomes.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from academy.services.reconciler import EnrollmentView


class OutcomeKind(str, Enum):
    NAVIGATE = "navigate"   # in-app route change
    REDIRECT = "redirect"   # full browser redirect to a provider URL
    HANDOFF = "handoff"     # provider session id for a redirect helper
    STATE = "state"         # stay on the page with a new view
    ERROR = "error"         # banner message, view unchanged


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    target: Optional[str] = None
    session_id: Optional[str] = None
    view: Optional[EnrollmentView] = None
    message: Optional[str] = None

    @classmethod
    def navigate(cls, target: str) -> "Outcome":
        return cls(OutcomeKind.NAVIGATE, target=target)

    @classmethod
    def redirect(cls, url: str) -> "Outcome":
        return cls(OutcomeKind.REDIRECT, target=url)

    @classmethod
    def handoff(cls, session_id: str) -> "Outcome":
        return cls(OutcomeKind.HANDOFF, session_id=session_id)

    @classmethod
    def state(cls, view: EnrollmentView) -> "Outcome":
        return cls(OutcomeKind.STATE, view=view)

    @classmethod
    def error(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.ERROR, message=message)

    @property
    def ok(self) -> bool:
        return self.kind is not OutcomeKind.ERROR
