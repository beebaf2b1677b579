from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from zyvero.modules.cart.storage import Storage
from zyvero.modules.catalog.client import Product

logger = logging.getLogger(__name__)

RECENT_KEY = "zyvero_recent"


class RecentlyViewed:
    """Most-recent-first list of product summaries, deduplicated by id."""

    def __init__(self, storage: Storage, limit: int = 6, key: str = RECENT_KEY):
        self.storage = storage
        self.limit = limit
        self.key = key

    def items(self) -> List[Dict[str, Any]]:
        try:
            raw = self.storage.get_item(self.key)
        except Exception as e:
            logger.warning("recently viewed slot not loaded: %s", e)
            return []
        try:
            data = json.loads(raw) if raw else []
        except (ValueError, TypeError) as e:
            logger.warning("recently viewed slot unreadable: %s", e)
            return []
        if not isinstance(data, list):
            return []
        return [p for p in data if isinstance(p, dict) and "id" in p]

    def record(self, product: Product) -> List[Dict[str, Any]]:
        entry = {
            "id": product.id,
            "title": product.title,
            "price": product.price,
            "rating": product.rating,
            "stock": product.stock,
            "category": product.category,
            "thumbnail": product.thumbnail,
            "discount_percentage": product.discount_percentage,
        }
        nxt = [entry] + [p for p in self.items() if p.get("id") != product.id]
        nxt = nxt[: self.limit]
        try:
            self.storage.set_item(self.key, json.dumps(nxt))
        except Exception as e:
            logger.warning("recently viewed slot not saved: %s", e)
        return nxt
