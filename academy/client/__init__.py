from academy.client.announcements import AnnouncementViewer
from academy.client.api import AcademyClient, ApiError, TransportError
from academy.client.checkout import CheckoutDelegate
from academy.client.curriculum import CurriculumViewer
from academy.client.flow import EnrollmentFlow, dashboard_link
from academy.client.outcomes import Outcome, OutcomeKind

__all__ = [
    "AcademyClient", "ApiError", "TransportError", "AnnouncementViewer", "CheckoutDelegate",
    "CurriculumViewer", "EnrollmentFlow", "dashboard_link", "Outcome", "OutcomeKind",
]
