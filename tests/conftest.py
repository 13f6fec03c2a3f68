from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from tests.helpers import TEST_SECRET_KEY, make_image_bytes


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway database and upload directory."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SECRET_KEY=TEST_SECRET_KEY,
        AUTO_CREATE_TABLES=True,
    )


@pytest.fixture
def upload_dir(test_settings) -> Path:
    return Path(test_settings.UPLOAD_DIR)


@pytest.fixture
def client(test_settings):
    """TestClient for an isolated app; entering it runs startup (tables, upload dir)."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register and log in a user, returning the bearer header."""
    client.post("/register", json={"username": "testuser", "password": "s3cret-pass"})
    response = client.post("/login", json={"username": "testuser", "password": "s3cret-pass"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG", color=(30, 200, 30))


@pytest.fixture
def restaurant(client, auth_headers):
    response = client.post(
        "/restaurants",
        json={"name": "Testaurant", "location": "Main Street 1"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def food_item(client, auth_headers, restaurant):
    response = client.post(
        "/food-items",
        data={
            "name": "Margherita",
            "description": "Tomato and basil",
            "price": "9.5",
            "restaurant_id": str(restaurant["id"]),
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()
