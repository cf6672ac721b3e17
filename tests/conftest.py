import pytest

from app import create_app


def fake_insight(name, industry):
    return f"{name} insight ({industry})"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "OPENAI_API_KEY": None,
        "INSIGHT_GENERATOR": fake_insight,
    })
    yield app
    app.extensions["insight_panel"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


def csrf_headers(client):
    cookie = client.get_cookie("csrf_token")
    return {"X-CSRF-Token": cookie.value if cookie else ""}


@pytest.fixture
def admin_client(client):
    resp = client.post("/auth/signin", json={"username": "priya", "password": "pw"})
    assert resp.status_code == 200
    resp = client.post("/auth/login", json={})
    assert resp.status_code == 200
    return client


@pytest.fixture
def company_payload():
    return {
        "name": "Acme",
        "industry": "Robotics",
        "location": "Kochi, India",
        "website": "acme.example.com",
        "established": "2001",
        "description": "Warehouse automation.",
    }
