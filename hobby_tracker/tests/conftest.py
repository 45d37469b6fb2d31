"""Shared fixtures: an in-memory migrated database and an app bound to one."""

import pytest
from fastapi.testclient import TestClient

from hobby_tracker.app.config import Settings
from hobby_tracker.app.database import Database
from hobby_tracker.app.models.user import User
from hobby_tracker.app.repositories.hobbies import HobbyRepository
from hobby_tracker.app.repositories.sessions import SessionRepository
from hobby_tracker.app.repositories.users import UserRepository
from hobby_tracker.app.utils.security import TokenService, hash_password
from hobby_tracker.main import create_app

TEST_SECRET = "test-secret-key"
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "hobby123"


@pytest.fixture
def database():
    """In-memory SQLite database with the schema migrated to head."""
    database = Database("sqlite://")
    database.migrate()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def sample_user(db):
    """A persisted user owning the hobbies under test."""
    user = User(username="alice", password_hash="fakehash")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def other_user(db):
    """A second user, for ownership checks."""
    user = User(username="bob", password_hash="fakehash")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def user_repo(db):
    return UserRepository(db)


@pytest.fixture
def hobby_repo(db):
    return HobbyRepository(db)


@pytest.fixture
def session_repo(db):
    return SessionRepository(db)


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET, expire_days=7)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SECRET_KEY=TEST_SECRET,
        DATABASE_URL="sqlite://",
        DEFAULT_USERNAME=DEFAULT_USERNAME,
        DEFAULT_PASSWORD=DEFAULT_PASSWORD,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Client for an app whose startup (migrations + seeding) has run."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_client(client):
    """Client logged in as the seeded default user (cookie set)."""
    response = client.post(
        "/api/auth/login",
        json={"username": DEFAULT_USERNAME, "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def second_user_headers(app, client):
    """Bearer headers for a second account created directly in the app's database."""
    db = app.state.database.session()
    try:
        user = User(username="intruder", password_hash=hash_password("secret"))
        db.add(user)
        db.commit()
        token = app.state.tokens.issue(user.id, user.username)
    finally:
        db.close()
    return {"Authorization": f"Bearer {token}"}
