from moodstore.database import order_db, product_db
from moodstore.security.auth import create_access_token
from moodstore.services.mood_detector import DETECTABLE_MOODS

from .conftest import HAMMOCK_ID, MICROSCOPE_ID, MUG_ID, SHIPPING, USER_EMAIL, USER_ID, auth_headers


def add(client, headers, product_id, quantity=1):
    return client.post("/api/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=headers)


# ==================== Health / auth ====================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_cart_requires_session(client):
    response = client.get("/api/cart")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token_is_rejected(client):
    token = create_access_token(USER_ID, USER_EMAIL, expires_minutes=-5)
    response = client.get("/api/cart", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == {"error": "Session expired"}


def test_issue_token_creates_profile(client):
    response = client.post(
        "/api/auth/token",
        json={"user_id": "user-grace", "email": "grace@example.com", "full_name": "Grace Hopper"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    profile = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"}).json()
    assert profile["id"] == "user-grace"
    assert profile["full_name"] == "Grace Hopper"
    assert profile["mood_preferences"] == {}


def test_update_profile(client, headers):
    response = client.put("/api/profile", json={"username": "ada"}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "ada"
    assert body["full_name"] == "Ada Lovelace"


# ==================== Catalog ====================

def test_products_by_mood(client):
    response = client.get("/api/products", params={"mood": "chill"})
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == len(body["products"]) > 0
    assert all("Chill" in p["moods"] for p in body["products"])
    assert HAMMOCK_ID in [p["id"] for p in body["products"]]


def test_in_stock_filter_hides_sold_out_products(client):
    ids = [p["id"] for p in client.get("/api/products", params={"limit": 100}).json()["products"]]
    assert MICROSCOPE_ID in ids

    ids = [p["id"] for p in client.get("/api/products", params={"limit": 100, "in_stock_only": True}).json()["products"]]
    assert MICROSCOPE_ID not in ids


def test_product_detail_and_related(client):
    assert client.get(f"/api/products/{HAMMOCK_ID}").json()["name"] == "Hammock for Two"
    assert client.get("/api/products/nope").status_code == 404

    related = client.get(f"/api/products/{HAMMOCK_ID}/related").json()
    assert 0 < len(related) <= 4
    assert HAMMOCK_ID not in [p["id"] for p in related]


def test_list_moods(client):
    moods = client.get("/api/products/moods").json()
    assert "Chill" in moods
    assert len(moods) == len(set(moods))


# ==================== Cart ====================

def test_adding_twice_merges_into_one_row(client, headers):
    first = add(client, headers, HAMMOCK_ID, 2).json()
    second = add(client, headers, HAMMOCK_ID, 1).json()
    assert second["id"] == first["id"]
    assert second["quantity"] == 3

    cart = client.get("/api/cart", headers=headers).json()
    assert len(cart["items"]) == 1
    assert cart["count"] == 3
    assert cart["subtotal"] == "179.97"


def test_add_unknown_or_sold_out_product(client, headers):
    response = add(client, headers, "nope")
    assert response.status_code == 404

    response = add(client, headers, MICROSCOPE_ID)
    assert response.status_code == 400
    assert "out of stock" in response.json()["error"]


def test_update_and_remove_line(client, headers):
    line = add(client, headers, MUG_ID).json()

    response = client.put(f"/api/cart/items/{line['id']}", json={"quantity": 4}, headers=headers)
    assert response.json()["quantity"] == 4

    assert client.put(f"/api/cart/items/{line['id']}", json={"quantity": 0}, headers=headers).status_code == 422
    assert client.put("/api/cart/items/missing", json={"quantity": 2}, headers=headers).status_code == 404

    response = client.delete("/api/cart/items/missing", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Item not in cart"
    assert response.json()["count"] == 4

    response = client.delete(f"/api/cart/items/{line['id']}", headers=headers)
    assert response.json()["items"] == []


def test_carts_are_per_user(client, headers):
    add(client, headers, MUG_ID)
    other = client.get("/api/cart", headers=auth_headers("user-grace", "grace@example.com")).json()
    assert other["items"] == []


def test_clear_cart(client, headers):
    add(client, headers, MUG_ID)
    add(client, headers, HAMMOCK_ID)
    response = client.delete("/api/cart", headers=headers)
    assert response.json()["count"] == 0
    assert client.get("/api/cart", headers=headers).json()["items"] == []


# ==================== Checkout / orders ====================

def test_checkout_reports_all_missing_fields(client, headers):
    add(client, headers, MUG_ID)
    response = client.post("/api/checkout", json={"name": "Ada", "email": USER_EMAIL}, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Please fill in all required fields: address, city, state, zip"
    # Nothing was placed
    assert order_db.list_orders(USER_ID) == []


def test_checkout_with_empty_cart(client, headers):
    response = client.post("/api/checkout", json=SHIPPING, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Cart is empty"


def test_checkout_places_order(client, headers):
    add(client, headers, HAMMOCK_ID, 2)

    response = client.post("/api/checkout", json={**SHIPPING, "shipping_method": "express"}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["invoice_queued"] is False

    order = body["order"]
    assert order["total"] == "129.97"
    assert order["status"] == "pending"
    assert [(i["product_name"], i["quantity"], i["unit_price"]) for i in order["items"]] == [
        ("Hammock for Two", 2, "59.99"),
    ]

    assert product_db.get_product(HAMMOCK_ID).inventory == 28
    assert client.get("/api/cart", headers=headers).json()["items"] == []


def test_standard_shipping_is_free(client, headers):
    add(client, headers, MUG_ID, 1)
    order = client.post("/api/checkout", json=SHIPPING, headers=headers).json()["order"]
    assert order["total"] == "18.00"


def test_checkout_rejects_quantity_above_stock(client, headers):
    add(client, headers, HAMMOCK_ID, 31)
    response = client.post("/api/checkout", json=SHIPPING, headers=headers)
    assert response.status_code == 400
    assert "Insufficient stock" in response.json()["error"]
    assert product_db.get_product(HAMMOCK_ID).inventory == 30


def test_order_line_keeps_price_at_purchase(client, headers):
    add(client, headers, MUG_ID, 1)
    order_id = client.post("/api/checkout", json=SHIPPING, headers=headers).json()["order"]["id"]

    product_db.table.update(MUG_ID, {"price": product_db.get_product(MUG_ID).price * 2})

    order = client.get(f"/api/orders/{order_id}", headers=headers).json()
    assert order["items"][0]["unit_price"] == "18.00"


def test_orders_are_private(client, headers):
    add(client, headers, MUG_ID)
    order_id = client.post("/api/checkout", json=SHIPPING, headers=headers).json()["order"]["id"]

    assert [o["id"] for o in client.get("/api/orders", headers=headers).json()] == [order_id]

    other = auth_headers("user-grace", "grace@example.com")
    assert client.get("/api/orders", headers=other).json() == []
    assert client.get(f"/api/orders/{order_id}", headers=other).status_code == 404


# ==================== Mood ====================

def test_quiz_questions(client):
    questions = client.get("/api/mood-quiz/questions").json()
    assert len(questions) == 5
    assert all(q["options"] for q in questions)


def test_quiz_updates_preferences_for_signed_in_user(client, headers):
    quiz = ["Happy", "Happy", "Happy", "Chill", "Tired"]
    answers = [{"question_index": i, "mood": m} for i, m in enumerate(quiz)]

    response = client.post("/api/mood-quiz", json={"answers": answers}, headers=headers)
    assert response.status_code == 200
    result = response.json()
    assert result["primary"] == "Happy"
    assert result["secondary"] == "Tired"

    profile = client.get("/api/profile", headers=headers).json()
    assert profile["mood_preferences"] == {"Happy": 2, "Tired": 1}


def test_anonymous_quiz_is_scored_but_not_stored(client):
    answers = [{"question_index": i, "mood": "Focused"} for i in range(5)]
    result = client.post("/api/mood-quiz", json={"answers": answers}).json()
    assert result["primary"] == "Focused"
    assert result["secondary"] is None


def test_incomplete_quiz_is_rejected(client):
    answers = [{"question_index": 0, "mood": "Happy"}]
    response = client.post("/api/mood-quiz", json={"answers": answers})
    assert response.status_code == 400


def test_select_mood_and_recent(client, headers):
    for mood in ["chill", "Happy", "Chill", "Tired", "Focused", "Chill"]:
        response = client.post("/api/moods/select", json={"mood": mood}, headers=headers)

    assert response.json() == {"mood": "Chill", "redirect": "/products?mood=Chill"}

    recent = client.get("/api/moods/recent", headers=headers).json()
    assert recent == [
        {"name": "Chill", "count": 3, "emoji": "🌱"},
        {"name": "Happy", "count": 1, "emoji": "😊"},
        {"name": "Tired", "count": 1, "emoji": "😴"},
    ]


def test_recent_moods_require_session(client):
    assert client.get("/api/moods/recent").status_code == 401


def test_detect_mood(client):
    response = client.post("/api/detect-mood", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Image data is required"}

    response = client.post("/api/detect-mood", json={"image": "data:image/jpeg;base64,/9j/4AAQ"})
    assert response.status_code == 200
    assert response.json()["mood"] in [m.value for m in DETECTABLE_MOODS]
