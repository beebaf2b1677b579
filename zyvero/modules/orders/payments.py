"""Stripe Checkout adapter.

Only shapes requests and responses; amounts, payment state and receipts are
handled by Stripe.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

import stripe

logger = logging.getLogger(__name__)

SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


class PaymentError(Exception):
    """Stripe rejected the request or could not be reached."""


def to_minor_units(price: Any) -> int:
    return int((Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_line_items(items: Iterable[Dict[str, Any]], currency: str) -> List[Dict[str, Any]]:
    line_items = []
    for i in items:
        product_data: Dict[str, Any] = {"name": i["title"]}
        if i.get("thumbnail"):
            product_data["images"] = [i["thumbnail"]]
        line_items.append({
            "quantity": int(i.get("quantity") or 1),
            "price_data": {
                "currency": currency.lower(),
                "unit_amount": to_minor_units(i["price"]),
                "product_data": product_data,
            },
        })
    return line_items


def create_checkout_session(
    items: Iterable[Dict[str, Any]],
    *,
    api_key: str,
    site_url: str,
    currency: str = "usd",
) -> str:
    """Open a hosted checkout for `items` and return its redirect URL."""
    site_url = site_url.rstrip("/")
    try:
        session = stripe.checkout.Session.create(
            api_key=api_key,
            mode="payment",
            line_items=build_line_items(items, currency),
            success_url=f"{site_url}/order-success?session_id={SESSION_PLACEHOLDER}",
            cancel_url=f"{site_url}/checkout",
        )
    except stripe.StripeError as e:
        logger.exception("Stripe checkout create failed")
        raise PaymentError(e.user_message or str(e) or "Stripe error") from e
    return session["url"]


def retrieve_session(session_id: str, *, api_key: str) -> Dict[str, Any]:
    try:
        session = stripe.checkout.Session.retrieve(session_id, api_key=api_key, expand=["line_items"])
    except stripe.StripeError as e:
        logger.warning("Stripe session %s lookup failed: %s", session_id, e)
        raise PaymentError(e.user_message or str(e) or "Failed to load session") from e
    return summarize_session(session)


def summarize_session(session: Dict[str, Any]) -> Dict[str, Any]:
    details: Optional[Dict[str, Any]] = session.get("customer_details") or {}
    line_items = (session.get("line_items") or {}).get("data") or []
    return {
        "id": session.get("id"),
        "amount_total": session.get("amount_total"),
        "currency": session.get("currency"),
        "payment_status": session.get("payment_status"),
        "customer_email": details.get("email") or session.get("customer_email"),
        "line_items": [
            {
                "description": li.get("description"),
                "quantity": li.get("quantity"),
                "amount_total": li.get("amount_total"),
                "currency": li.get("currency"),
            }
            for li in line_items
        ],
    }
