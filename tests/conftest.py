import os

# Settings are read once, before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_SALT_ROUNDS"] = "4"

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from celltech.main import app
from celltech.database import Base, get_db
from celltech.models.user import User
from celltech.services.auth_service import hash_password
from celltech.utils.cache import cache_service


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def fake_cache(monkeypatch):
    """Replace the Redis client so tests never depend on a running server."""
    client = MagicMock()
    client.get.return_value = None
    client.delete.return_value = 0
    monkeypatch.setattr(cache_service, "client", client)
    return client


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    
    with TestClient(app) as test_client:
        yield test_client
    
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    
    yield session
    
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seller(db_session):
    """A persisted user to credit sales to."""
    user = User(name="Seller", email="seller@celltech.com", password=hash_password("secret123"))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def login(client):
    """Factory registering an account and returning its login payload (userId, token, ...)."""
    def _login(email="admin@celltech.com", password="secret123", name="Admin"):
        client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password}
        )
        response = client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["content"]
    return _login


@pytest.fixture
def auth_user(login):
    return login()


@pytest.fixture
def auth_headers(auth_user):
    return {"Authorization": f"Bearer {auth_user['token']}"}


@pytest.fixture
def create_product(client, auth_headers):
    """Factory creating a product through the API and returning its JSON."""
    def _create(name="iPhone 15", price=999.0, stock=10, **extra):
        response = client.post(
            "/api/v1/product",
            json={"name": name, "price": price, "stock": stock, **extra},
            headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["content"]
    return _create
