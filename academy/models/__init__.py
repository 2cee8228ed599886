# Imported for their side effect of registering tables on Base.metadata
from academy.db.base import Base  # noqa: F401
import academy.models.user            # noqa: F401
import academy.models.class_          # noqa: F401
import academy.models.event           # noqa: F401
import academy.models.enrollment      # noqa: F401
import academy.models.payment         # noqa: F401
import academy.models.parent_child    # noqa: F401
import academy.models.curriculum      # noqa: F401
import academy.models.notification    # noqa: F401
import academy.models.announcement    # noqa: F401
import academy.models.mentor_profile  # noqa: F401

__all__: list[str] = []
