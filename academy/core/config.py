# academy/core/config.py
import os
from typing import ClassVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'academy.db')}")


class Settings(BaseModel):
    # Not a pydantic field
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")))
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default_factory=lambda: int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")))

    APP_URL: str = Field(default_factory=lambda: os.getenv("APP_URL", "http://localhost:3000").rstrip("/"))

    # Hosted checkout; an empty key switches the service to demo mode
    CHECKOUT_API_URL: str = Field(default_factory=lambda: os.getenv("CHECKOUT_API_URL", ""))
    CHECKOUT_API_KEY: str = Field(default_factory=lambda: os.getenv("CHECKOUT_API_KEY", ""))
    CHECKOUT_WEBHOOK_SECRET: str = Field(default_factory=lambda: os.getenv("CHECKOUT_WEBHOOK_SECRET", ""))
    CHECKOUT_CURRENCY: str = Field(default_factory=lambda: os.getenv("CHECKOUT_CURRENCY", "usd"))
    CHECKOUT_TIMEOUT_SECONDS: float = Field(default_factory=lambda: float(os.getenv("CHECKOUT_TIMEOUT_SECONDS", "10")))

    ALLOW_TEST_REGISTRATION: bool = Field(default_factory=lambda: _env_bool("ALLOW_TEST_REGISTRATION", "true"))
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS_ON_STARTUP", "true"))

    ADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("ADMIN_EMAIL", "admin@example.com"))
    ADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "admin12345"))

    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


settings = Settings()
