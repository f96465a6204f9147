"""Shared fixtures: an in-memory Mongo per test, user factories and an API client."""
import os

# Must be set before app settings are instantiated
os.environ.setdefault("bcrypt_rounds", "4")
os.environ.setdefault("jwt_secret_key", "test-secret-key")

from datetime import date

import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from app.models.user import User
from app.services.auth import create_access_token, hash_password
from app.utils.base import UserRole


@pytest.fixture(autouse=True)
def mongo():
    disconnect(alias="default")
    conn = connect(
        "social_network_test",
        alias="default",
        host="mongodb://localhost",
        mongo_client_class=mongomock.MongoClient,
    )
    yield conn
    conn.drop_database("social_network_test")
    disconnect(alias="default")


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(username: str | None = None, role: UserRole = UserRole.USER, active: bool = True, password: str = "Password1") -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        user = User(
            name="Test",
            surname="User",
            email=f"{username}@example.com",
            username=username,
            password=hash_password(password),
            birthdate=date(1990, 5, 17),
            bio="",
            role=role.value,
            active=active,
        )
        user.save()
        return user

    return _make


@pytest.fixture
def user(make_user) -> User:
    return make_user("alice")


@pytest.fixture
def other_user(make_user) -> User:
    return make_user("bob")


@pytest.fixture
def admin(make_user) -> User:
    return make_user("root", role=UserRole.ADMIN)


@pytest.fixture
def client() -> TestClient:
    # Not used as a context manager, so the real Mongo lifespan never runs
    from main import app
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
