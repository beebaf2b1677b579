from __future__ import annotations

from flask import Blueprint, current_app, request

from zyvero.app.common.errors import abort_json, validation_error
from zyvero.app.common.validation import get_json, is_price, is_quantity
from zyvero.modules.cart.routes import current_cart
from zyvero.modules.orders import payments

bp = Blueprint("orders", __name__)


def _stripe_key() -> str:
    key = current_app.config.get("STRIPE_SECRET_KEY")
    if not key:
        abort_json(500, "config_error", "Missing STRIPE_SECRET_KEY")
    return key


def _valid_line(item) -> bool:
    if not isinstance(item, dict) or "title" not in item or not is_price(item.get("price")):
        return False
    return item.get("quantity") is None or is_quantity(item["quantity"])


@bp.post("/checkout")
def checkout():
    data = get_json(required=False)
    items = data.get("items")
    if items is None:
        items = [i.to_dict() for i in current_cart().items]
    if not isinstance(items, list) or not items:
        abort_json(400, "empty_cart", "Cart is empty")

    bad = [idx for idx, i in enumerate(items) if not _valid_line(i)]
    if bad:
        validation_error("Each item needs a title, a numeric price and a positive integer quantity", invalid=bad)

    try:
        url = payments.create_checkout_session(
            items,
            api_key=_stripe_key(),
            site_url=current_app.config["SITE_URL"],
            currency=current_app.config.get("CURRENCY", "usd"),
        )
    except payments.PaymentError as e:
        abort_json(500, "payment_error", str(e))

    return {"url": url}, 200


@bp.get("/stripe/session")
def stripe_session():
    session_id = (request.args.get("session_id") or "").strip()
    if not session_id:
        abort_json(400, "validation_error", "Missing session_id")

    try:
        summary = payments.retrieve_session(session_id, api_key=_stripe_key())
    except payments.PaymentError as e:
        abort_json(500, "payment_error", str(e))

    return summary, 200
