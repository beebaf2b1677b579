import pytest
import stripe

from zyvero.modules.orders.payments import build_line_items, summarize_session, to_minor_units


@pytest.fixture()
def stripe_calls(monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(("create", kwargs))
        return {"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1"}

    def fake_retrieve(session_id, **kwargs):
        calls.append(("retrieve", session_id, kwargs))
        return {
            "id": session_id,
            "amount_total": 2998,
            "currency": "usd",
            "payment_status": "paid",
            "customer_details": {"email": "buyer@example.com"},
            "customer_email": None,
            "line_items": {"data": [
                {"description": "Widget", "quantity": 2, "amount_total": 1998, "currency": "usd"},
                {"description": "Sock", "quantity": 1, "amount_total": 1000, "currency": "usd"},
            ]},
        }

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    monkeypatch.setattr(stripe.checkout.Session, "retrieve", fake_retrieve)
    return calls


@pytest.mark.parametrize("price, cents", [(9.99, 999), (0.1, 10), (19.995, 2000), (5, 500), ("1.005", 101)])
def test_to_minor_units(price, cents):
    assert to_minor_units(price) == cents


def test_build_line_items():
    items = [
        {"id": 1, "title": "Widget", "price": 9.99, "quantity": 2, "thumbnail": "https://cdn.test/1.png"},
        {"id": 2, "title": "Sock", "price": 10},
    ]

    assert build_line_items(items, "USD") == [
        {
            "quantity": 2,
            "price_data": {
                "currency": "usd",
                "unit_amount": 999,
                "product_data": {"name": "Widget", "images": ["https://cdn.test/1.png"]},
            },
        },
        {
            "quantity": 1,
            "price_data": {"currency": "usd", "unit_amount": 1000, "product_data": {"name": "Sock"}},
        },
    ]


def test_summarize_session_falls_back_to_customer_email():
    summary = summarize_session({"id": "cs_1", "customer_email": "a@b.test", "line_items": None})

    assert summary["customer_email"] == "a@b.test"
    assert summary["line_items"] == []


def test_checkout_uses_current_cart(client, stripe_calls):
    client.post("/api/cart/items", json={"id": 1, "title": "Widget", "price": 9.99, "thumbnail": "x"})
    client.post("/api/cart/items/1/increment")

    r = client.post("/api/checkout")

    assert r.status_code == 200
    assert r.json == {"url": "https://checkout.stripe.test/cs_test_1"}

    _, kwargs = stripe_calls[0]
    assert kwargs["api_key"] == "sk_test_123"
    assert kwargs["mode"] == "payment"
    assert kwargs["line_items"][0]["quantity"] == 2
    assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 999
    assert kwargs["success_url"] == "http://shop.test/order-success?session_id={CHECKOUT_SESSION_ID}"
    assert kwargs["cancel_url"] == "http://shop.test/checkout"


def test_checkout_with_explicit_items(client, stripe_calls):
    r = client.post("/api/checkout", json={"items": [{"id": 5, "title": "Lamp", "price": 20, "quantity": 3}]})

    assert r.status_code == 200
    assert stripe_calls[0][1]["line_items"][0]["quantity"] == 3


def test_checkout_empty_cart(client, stripe_calls):
    r = client.post("/api/checkout")

    assert r.status_code == 400
    assert r.json["error"]["message"] == "Cart is empty"
    assert stripe_calls == []


def test_checkout_rejects_items_without_price(client, stripe_calls):
    r = client.post("/api/checkout", json={"items": [{"id": 1, "title": "Widget"}]})

    assert r.status_code == 400
    assert r.json["error"]["details"] == {"invalid": [0]}


@pytest.mark.parametrize(
    "item",
    [
        {"id": 1, "title": "Widget", "price": "abc"},
        {"id": 1, "title": "Widget", "price": None},
        {"id": 1, "title": "Widget", "price": True},
        {"id": 1, "title": "Widget", "price": 5, "quantity": "x"},
        {"id": 1, "title": "Widget", "price": 5, "quantity": 0},
        {"id": 1, "title": "Widget", "price": 5, "quantity": 1.5},
    ],
)
def test_checkout_rejects_malformed_items(client, stripe_calls, item):
    good = {"id": 2, "title": "Sock", "price": 3, "quantity": 2}

    r = client.post("/api/checkout", json={"items": [good, item]})

    assert r.status_code == 400
    assert r.json["error"]["code"] == "validation_error"
    assert r.json["error"]["details"] == {"invalid": [1]}
    assert stripe_calls == []


def test_checkout_missing_key(app, client, stripe_calls):
    app.config["STRIPE_SECRET_KEY"] = None

    r = client.post("/api/checkout", json={"items": [{"id": 1, "title": "Widget", "price": 1}]})

    assert r.status_code == 500
    assert r.json["error"]["message"] == "Missing STRIPE_SECRET_KEY"


def test_checkout_gateway_error(client, monkeypatch):
    def fake_create(**kwargs):
        raise stripe.StripeError("Your card was declined")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    r = client.post("/api/checkout", json={"items": [{"id": 1, "title": "Widget", "price": 1}]})

    assert r.status_code == 500
    assert r.json["error"]["code"] == "payment_error"
    assert r.json["error"]["message"] == "Your card was declined"


def test_session_lookup(client, stripe_calls):
    r = client.get("/api/stripe/session?session_id=cs_test_1")

    assert r.status_code == 200
    assert r.json == {
        "id": "cs_test_1",
        "amount_total": 2998,
        "currency": "usd",
        "payment_status": "paid",
        "customer_email": "buyer@example.com",
        "line_items": [
            {"description": "Widget", "quantity": 2, "amount_total": 1998, "currency": "usd"},
            {"description": "Sock", "quantity": 1, "amount_total": 1000, "currency": "usd"},
        ],
    }
    assert stripe_calls[0] == ("retrieve", "cs_test_1", {"api_key": "sk_test_123", "expand": ["line_items"]})


def test_session_lookup_requires_id(client, stripe_calls):
    r = client.get("/api/stripe/session")

    assert r.status_code == 400
    assert stripe_calls == []
