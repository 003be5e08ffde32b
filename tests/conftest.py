import random
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from moodstore.database import product_db, profile_db, reset_store
from moodstore.main import app
from moodstore.routes.mood import get_mood_detector
from moodstore.security.auth import create_access_token
from moodstore.services.mood_detector import MoodDetector

HAMMOCK_ID = "9b1f6c1e-0006-4d7a-9a51-6f0c2b7f0a06"
MUG_ID = "9b1f6c1e-0007-4d7a-9a51-6f0c2b7f0a07"
MICROSCOPE_ID = "9b1f6c1e-0013-4d7a-9a51-6f0c2b7f0a13"

USER_ID = "user-ada"
USER_EMAIL = "ada@example.com"

SHIPPING = {
    "name": "Ada Lovelace",
    "email": USER_EMAIL,
    "address": "12 St James's Square",
    "city": "London",
    "state": "LDN",
    "zip": "SW1Y 4JH",
}


def auth_headers(user_id: str = USER_ID, email: str = USER_EMAIL) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, email)}"}


@pytest.fixture(autouse=True)
def clean_store():
    reset_store()
    yield
    reset_store()


@pytest.fixture
def client():
    app.dependency_overrides[get_mood_detector] = lambda: MoodDetector(delay=0, rng=random.Random(7))
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    profile_db.ensure_profile(USER_ID, email=USER_EMAIL, full_name="Ada Lovelace")
    return auth_headers()


@pytest.fixture
def hammock():
    return product_db.get_product(HAMMOCK_ID)


@pytest.fixture
def mug():
    return product_db.get_product(MUG_ID)


@pytest.fixture
def ten_dollar_product(hammock):
    return hammock.model_copy(update={"id": "p-ten", "name": "Ten", "price": Decimal("10.00")})
