from __future__ import annotations

from flask import Blueprint, request

from zyvero.app.common.errors import validation_error
from zyvero.app.common.validation import get_json, is_price, parse_item_id, require_fields
from zyvero.modules.cart.storage import request_storage
from zyvero.modules.cart.store import CartStore

bp = Blueprint("cart", __name__)

CART_ENVIRON_KEY = "zyvero.cart_store"


def current_cart() -> CartStore:
    """The cart for the calling browser, built once per request.

    Cached in the WSGI environ rather than on `g`: an already pushed app
    context is shared by every request made inside it.
    """
    store = request.environ.get(CART_ENVIRON_KEY)
    if store is None:
        store = CartStore(request_storage())
        request.environ[CART_ENVIRON_KEY] = store
    return store


def cart_payload(store: CartStore) -> dict:
    payload = {
        "items": [i.to_dict() for i in store.items],
        "count": store.count,
        "total": store.total,
    }
    if store.last_error is not None:
        payload["persistence_error"] = str(store.last_error)
    return payload


@bp.get("/cart")
def get_cart():
    return cart_payload(current_cart()), 200


@bp.post("/cart/items")
def add_to_cart():
    data = get_json()
    require_fields(data, ["id", "title", "price"])
    if not is_price(data["price"]):
        validation_error("price must be a number", field="price")

    store = current_cart()
    store.add_item(data)
    return cart_payload(store), 201


@bp.post("/cart/items/<item_id>/increment")
def increment_item(item_id: str):
    store = current_cart()
    store.increment(parse_item_id(item_id))
    return cart_payload(store), 200


@bp.post("/cart/items/<item_id>/decrement")
def decrement_item(item_id: str):
    store = current_cart()
    store.decrement(parse_item_id(item_id))
    return cart_payload(store), 200


@bp.delete("/cart/items/<item_id>")
def remove_item(item_id: str):
    # unknown ids are a no-op, not a 404
    store = current_cart()
    store.remove_item(parse_item_id(item_id))
    return cart_payload(store), 200


@bp.delete("/cart")
def clear_cart():
    store = current_cart()
    store.clear()
    return cart_payload(store), 200
