from typing import Generator
import pytest

from storefront import models
from storefront.auth import TokenService, hash_password
from storefront.config import Settings
from storefront.db import Base, make_engine, make_session_factory
from storefront.main import create_app

TEST_SECRET = "storefront-test-secret-0123456789abcdef"
TEST_PEPPER = "pepper"


@pytest.fixture(scope="function")
def settings() -> Settings:
    # Use in-memory SQLite with a single connection
    return Settings(
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        password_pepper=TEST_PEPPER,
        log_level="WARNING",
        environment="test",
    )


@pytest.fixture(scope="function")
def db_session(settings) -> Generator:
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    db = make_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture(scope="function")
def app(settings):
    return create_app(settings)


@pytest.fixture(scope="function")
def client(app):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def app_db(app) -> Generator:
    """A session on the same in-memory database the client talks to."""
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService.from_settings(settings)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(tokens) -> dict:
    # admins do not need a row in the users table to pass the guard
    admin = models.User(id=0, email="", first_name="", last_name="", is_admin=True)
    return bearer(tokens.issue(admin))


@pytest.fixture
def make_user(app_db):
    def _make_user(email="d@d.d", first_name="a", last_name="b", password="secret", is_admin=False):
        user = models.User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            is_admin=is_admin,
            password_hash=hash_password(password, TEST_PEPPER),
        )
        app_db.add(user)
        app_db.commit()
        app_db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def user_headers(tokens, user) -> dict:
    return bearer(tokens.issue(user))


@pytest.fixture
def product(client, admin_headers) -> dict:
    category = client.post("/api/v1/categories", json={"name": "Shoes"}, headers=admin_headers).json()
    r = client.post(
        "/api/v1/products",
        json={"name": "Sneaker", "price": "49.90", "categoryId": category["id"]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    return r.json()
