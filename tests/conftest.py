import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from cartify.database import get_session
from cartify.main import app
from cartify.models.product import Product


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(session):
    def factory(**overrides) -> Product:
        fields = {
            "title": "Test Product",
            "description": "A product used in tests",
            "image": "https://img.example/p.png",
            "price": 10.0,
            "quantity": 10,
        }
        fields.update(overrides)
        product = Product(**fields)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return factory


@pytest.fixture
def register(client):
    counter = {"n": 0}

    def factory(name: str | None = None, email: str | None = None, password: str = "Secret@123"):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        email = email or f"{name}@example.com"
        resp = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        data["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return data

    return factory


@pytest.fixture
def admin_headers(client):
    resp = client.post(
        "/api/admin/login",
        json={"email": "admin@cartify.com", "password": "Admin@2001"},
    )
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
