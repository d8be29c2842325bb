"""
Test configuration and fixtures.

Environment must be set before any agroconnect module is imported, because
settings, the engine and the logging sinks are created at import time.
"""

import os
import tempfile


def _early_setup_test_environment() -> None:
    os.environ["ENVIRONMENT"] = "test"
    os.environ["DATABASE_URL"] = "sqlite://"
    os.environ["AUTH_JWT_SECRET"] = "test-secret"
    os.environ["AUTH_JWT_AUDIENCE"] = "authenticated"
    os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="agroconnect-storage-")
    os.environ["STORAGE_PUBLIC_URL"] = "http://testserver/storage"
    os.environ["LOG_LEVEL"] = "WARNING"


_early_setup_test_environment()

from datetime import date, timedelta  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from agroconnect.auth.security import create_access_token  # noqa: E402
from agroconnect.db.init import init_db  # noqa: E402
from agroconnect.db.session import Base, engine  # noqa: E402
from agroconnect.main import app  # noqa: E402
from agroconnect.services.storage import LocalBucketStorage, get_storage  # noqa: E402

FARMER_ID = "farmer-1"
OTHER_FARMER_ID = "farmer-2"
BUYER_ID = "buyer-1"


@pytest.fixture(autouse=True)
def database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(tmp_path: Path) -> LocalBucketStorage:
    bucket_storage = LocalBucketStorage(tmp_path, "product-images", "http://testserver/storage")
    app.dependency_overrides[get_storage] = lambda: bucket_storage
    yield bucket_storage
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture
def client(storage) -> TestClient:
    return TestClient(app)


@pytest.fixture
def token_for():
    def _token_for(user_id: str, role: str = "farmer") -> str:
        return create_access_token({"sub": user_id, "email": f"{user_id}@example.com", "user_metadata": {"role": role}})

    return _token_for


@pytest.fixture
def auth_headers(token_for):
    def _auth_headers(user_id: str = FARMER_ID, role: str = "farmer") -> dict:
        return {"Authorization": f"Bearer {token_for(user_id, role)}"}

    return _auth_headers


@pytest.fixture
def product_payload():
    def _product_payload(**overrides) -> dict:
        today = date.today()
        payload = {
            "cropType": "Rice",
            "variety": "FARO 44",
            "title": "Premium FARO 44 Rice",
            "isOrganic": False,
            "qualityGrade": "premium",
            "quantityAvailable": 100,
            "unit": "bags",
            "pricePerUnit": 50000,
            "availableFrom": today.isoformat(),
            "availableUntil": (today + timedelta(days=30)).isoformat(),
            "storageMethod": "Warehouse",
            "location": "Kano",
            "images": [f"http://testserver/storage/product-images/{FARMER_ID}/1700000000000-abc.jpg"],
        }
        payload.update(overrides)
        return payload

    return _product_payload


@pytest.fixture
def create_product(client, auth_headers, product_payload):
    def _create_product(farmer_id: str = FARMER_ID, **overrides) -> dict:
        response = client.post(
            "/api/farmer/products",
            json=product_payload(**overrides),
            headers=auth_headers(farmer_id),
        )
        assert response.status_code == 201, response.text
        return response.json()["product"]

    return _create_product
