# academy/db/init_db.py
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.core.config import settings
from academy.core.roles import Role
from academy.core.security_password import hash_password
from academy.models.user import User

logger = logging.getLogger(__name__)


def init_db(db: Session) -> None:
    """Idempotent seed: makes sure a T1 admin exists."""
    email = settings.ADMIN_EMAIL.strip().lower()
    admin = db.scalar(select(User).where(User.email == email))
    if not admin:
        admin = User(
            name="Administrator",
            email=email,
            hashed_password=hash_password(settings.ADMIN_PASSWORD),
            role=Role.T1_ADMIN,
        )
        db.add(admin)
        logger.info("Seeded admin user %s", email)

    db.commit()
