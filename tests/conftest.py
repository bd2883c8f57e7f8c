from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from taskflow.database import Base, get_db
from taskflow.models import User
from taskflow.utils.security import create_access_token, hash_password

PASSWORD = "secret123"
_PASSWORD_HASH = None


def password_hash():
    # bcrypt is slow; hash the shared test password once
    global _PASSWORD_HASH
    if _PASSWORD_HASH is None:
        _PASSWORD_HASH = hash_password(PASSWORD)
    return _PASSWORD_HASH


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(username, role="user", designation="", email=None, is_active=True):
        user = User(
            username=username,
            email=email or f"{username.lower().replace(' ', '.')}@example.com",
            hashed_password=password_hash(),
            role=role,
            designation=designation,
            is_active=is_active,
            created_at=datetime(2024, 1, 1),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def superadmin(make_user):
    return make_user("Admin", role="superadmin")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture
def admin_headers(superadmin):
    return auth_headers(superadmin)


@pytest.fixture
def headers_for():
    return auth_headers
