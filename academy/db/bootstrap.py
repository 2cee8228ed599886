# academy/db/bootstrap.py
import logging
import os

from alembic import command
from alembic.config import Config

from academy.db.session import SessionLocal
from academy.db.init_db import init_db

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def run_migrations_and_seed() -> None:
    cfg = Config(os.path.join(BASE_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(BASE_DIR, "migrations"))

    logger.info("Applying migrations")
    command.upgrade(cfg, "head")

    with SessionLocal() as db:
        init_db(db)
