"""Local filtering, sorting and recommendation heuristics over product lists."""

from __future__ import annotations

from typing import List

from zyvero.modules.catalog.client import Product

SORT_KEYS = ("recommended", "price_low", "price_high", "rating_high", "title_az")


def filter_products(products: List[Product], query: str) -> List[Product]:
    q = (query or "").strip().lower()
    if not q:
        return list(products)
    return [p for p in products if q in f"{p.title} {p.brand} {p.category}".lower()]


def build_recommendations(products: List[Product], query: str, limit: int = 12) -> List[Product]:
    """Category/brand matches for any query token first, then top-rated."""
    tokens = (query or "").strip().lower().split()

    soft = [
        p for p in products
        if any(t in p.category.lower() or t in p.brand.lower() for t in tokens)
    ]
    trending = sorted(products, key=lambda p: p.rating or 0, reverse=True)

    seen = set()
    merged: List[Product] = []
    for p in soft + trending:
        if p.id not in seen:
            seen.add(p.id)
            merged.append(p)
        if len(merged) >= limit:
            break
    return merged


def sort_products(products: List[Product], key: str = "recommended") -> List[Product]:
    items = list(products)
    if key == "price_low":
        items.sort(key=lambda p: p.price)
    elif key == "price_high":
        items.sort(key=lambda p: p.price, reverse=True)
    elif key == "rating_high":
        items.sort(key=lambda p: p.rating, reverse=True)
    elif key == "title_az":
        items.sort(key=lambda p: p.title.casefold())
    return items


def similar_products(products: List[Product], current_id: int, limit: int = 12) -> List[Product]:
    return [p for p in products if p.id != current_id][:limit]


def also_bought(products: List[Product], current_id: int, current_category: str, limit: int = 12) -> List[Product]:
    return [p for p in products if p.id != current_id and p.category != current_category][:limit]
