# academy/client/checkout.py
import logging
from typing import Optional

from academy.client.api import GENERIC_ERROR, AcademyClient, ApiError, TransportError
from academy.client.outcomes import Outcome
from academy.services.reconciler import is_safe_redirect

logger = logging.getLogger(__name__)

NO_URL_MESSAGE = "No checkout URL returned"
INVALID_URL_MESSAGE = "Invalid checkout URL received"
CHECKOUT_FALLBACK = "Failed to create checkout session"


class CheckoutDelegate:
    """Asks the API for a hosted checkout session and turns the answer into an Outcome.

    One request per call and no retry; on failure nothing changed server side
    and the caller may simply call again.
    """

    def __init__(self, client: AcademyClient):
        self.client = client

    def start(self, *, class_id: Optional[int] = None, event_id: Optional[int] = None,
              quantity: int = 1, registration_type: str = "individual",
              child_id: Optional[int] = None) -> Outcome:
        body = {"quantity": quantity, "registrationType": registration_type}
        if class_id is not None:
            body["classId"] = class_id
        if child_id is not None:
            body["childId"] = child_id
        if event_id is not None:
            body["eventId"] = event_id

        data = self.client.post("/api/create-checkout-session", body, fallback=CHECKOUT_FALLBACK)
        return self.interpret(data)

    def try_start(self, **kw) -> Outcome:
        """`start` with API and transport failures folded into error outcomes."""
        try:
            return self.start(**kw)
        except ApiError as e:
            return Outcome.error(e.message or CHECKOUT_FALLBACK)
        except TransportError:
            return Outcome.error(GENERIC_ERROR)

    @staticmethod
    def interpret(data) -> Outcome:
        data = data if isinstance(data, dict) else {}
        url = data.get("url")
        if url:
            if not is_safe_redirect(url):
                logger.warning("Refusing checkout redirect to %r", url)
                return Outcome.error(INVALID_URL_MESSAGE)
            return Outcome.redirect(url)
        session_id = data.get("sessionId")
        if session_id:
            return Outcome.handoff(session_id)
        return Outcome.error(NO_URL_MESSAGE)
