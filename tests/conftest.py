"""
Pytest configuration and fixtures for the bookstore tests.
"""
import os
from decimal import Decimal

import pytest

# Set test environment before importing bookstore modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

import bookstore.data.models  # noqa: E402,F401
from bookstore.api import create_app  # noqa: E402
from bookstore.data.database import Base, SessionLocal, engine  # noqa: E402
from bookstore.data.models.book import BookModel  # noqa: E402
from bookstore.data.models.user import UserModel  # noqa: E402
from bookstore.domain.enums import UserRole  # noqa: E402


@pytest.fixture(autouse=True)
def schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.CUSTOMER, **kwargs) -> UserModel:
        counter["n"] += 1
        user = UserModel(
            email=kwargs.pop("email", f"user{counter['n']}@example.com"),
            name=kwargs.pop("name", f"User {counter['n']}"),
            role=role,
            **kwargs,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_book(db):
    def _make(title: str = "Book", price: str = "10000", stock: int = 10, **kwargs) -> BookModel:
        book = BookModel(title=title, price=Decimal(price), stock=stock, **kwargs)
        db.add(book)
        db.commit()
        return book

    return _make


@pytest.fixture
def user(make_user) -> UserModel:
    return make_user()


@pytest.fixture
def admin(make_user) -> UserModel:
    return make_user(role=UserRole.ADMIN)


@pytest.fixture
def auth():
    """Naglowki tozsamosci, jakie ustawia gateway."""

    def _auth(user: UserModel) -> dict:
        return {"X-User-Id": str(user.id), "X-User-Role": user.role.value}

    return _auth


@pytest.fixture
def headers(user, auth) -> dict:
    return auth(user)


@pytest.fixture
def admin_headers(admin, auth) -> dict:
    return auth(admin)
