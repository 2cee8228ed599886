"""Shared fixtures: in-memory database, API client, users and offerings."""
import os

# settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "0"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["CHECKOUT_WEBHOOK_SECRET"] = "whsec_test"
os.environ["APP_URL"] = "http://app.test"
os.environ.pop("CHECKOUT_API_KEY", None)

from dataclasses import dataclass, field  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from academy.core.roles import Role  # noqa: E402
from academy.core.security_password import hash_password  # noqa: E402
from academy.core.tokens import create_access_token  # noqa: E402
from academy.db.session import get_db  # noqa: E402
from academy.main import api  # noqa: E402
from academy.models import Base  # noqa: E402
from academy.models.class_ import Class  # noqa: E402
from academy.models.event import Event  # noqa: E402
from academy.models.parent_child import ParentChild, RelationshipStatus  # noqa: E402
from academy.models.user import User  # noqa: E402
from academy.services.checkout import CheckoutError, CheckoutProvider, CheckoutSession, get_checkout_provider  # noqa: E402

PASSWORD = "s3cret-pass"

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# hashing is slow; every fixture user shares one hash
_PASSWORD_HASH = hash_password(PASSWORD)


@dataclass
class FakeCheckoutProvider(CheckoutProvider):
    url: Optional[str] = "https://pay.example.com/cs_test_1"
    session_id: Optional[str] = "cs_test_1"
    fail: bool = False
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def create_session(self, *, item, success_url, cancel_url, metadata, customer_email=None):
        self.calls.append({"item": item, "success_url": success_url, "cancel_url": cancel_url,
                           "metadata": metadata, "customer_email": customer_email})
        if self.fail:
            raise CheckoutError("provider down")
        return CheckoutSession(id=self.session_id, url=self.url)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def provider():
    return FakeCheckoutProvider()


@pytest.fixture
def client(db, provider):
    def _get_db():
        s = TestingSessionLocal()
        try:
            yield s
        finally:
            s.close()

    api.dependency_overrides[get_db] = _get_db
    api.dependency_overrides[get_checkout_provider] = lambda: provider
    with TestClient(api) as c:
        yield c
    api.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: Role = Role.STUDENT, email: Optional[str] = None, name: Optional[str] = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value.lower()}{n}@example.com",
            hashed_password=_PASSWORD_HASH,
            role=role,
        )
        db.add(user); db.commit(); db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_class(db):
    def _make(**kw) -> Class:
        data = {"title": "Public Speaking 101", "price": None, "capacity": 20, "current_count": 0, "is_active": True}
        data.update(kw)
        obj = Class(**data)
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

    return _make


@pytest.fixture
def make_event(db):
    def _make(**kw) -> Event:
        data = {"title": "Open Debate Night", "price": None, "capacity": 100, "current_count": 0, "is_active": True}
        data.update(kw)
        obj = Event(**data)
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

    return _make


@pytest.fixture
def link(db):
    def _link(parent: User, child: User, status=RelationshipStatus.APPROVED) -> ParentChild:
        row = ParentChild(parent_id=parent.id, child_id=child.id, status=status)
        db.add(row); db.commit(); db.refresh(row)
        return row

    return _link


def token_for(user: User) -> str:
    return create_access_token(sub=user.email, role=user.role.value)


def auth(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def parent(make_user):
    return make_user(Role.PARENT)


@pytest.fixture
def student(make_user):
    return make_user(Role.STUDENT)


@pytest.fixture
def admin(make_user):
    return make_user(Role.T1_ADMIN)
