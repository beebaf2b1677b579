"""Thin client for the public product catalog API (dummyjson.com shape)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """The catalog API could not be reached or answered with an error."""


@dataclass
class Product:
    id: int
    title: str
    price: float
    rating: float = 0.0
    stock: Optional[int] = None
    category: str = ""
    thumbnail: str = ""
    brand: str = ""
    description: str = ""
    discount_percentage: Optional[float] = None
    images: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            price=data.get("price") or 0,
            rating=data.get("rating") or 0.0,
            stock=data.get("stock"),
            category=data.get("category") or "",
            thumbnail=data.get("thumbnail") or "",
            brand=data.get("brand") or "",
            description=data.get("description") or "",
            discount_percentage=data.get("discountPercentage"),
            images=list(data.get("images") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def cart_candidate(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "price": self.price, "thumbnail": self.thumbnail}


class CatalogClient:
    def __init__(self, base_url: str, timeout: float = 5.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("catalog request %s failed: %s", url, e)
            raise CatalogError(str(e)) from e

    def _json(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        r = self._get(path, params)
        if not r.ok:
            raise CatalogError(f"catalog returned {r.status_code} for {path}")
        try:
            return r.json()
        except ValueError as e:
            raise CatalogError(f"catalog returned invalid JSON for {path}") from e

    def _products(self, path: str, params: Dict[str, Any] | None = None) -> List[Product]:
        data = self._json(path, params) or {}
        return [Product.from_api(p) for p in data.get("products") or []]

    def list_products(self, limit: int = 24, skip: int = 0) -> List[Product]:
        return self._products("/products", {"limit": limit, "skip": skip})

    def search(self, query: str, limit: int = 8) -> List[Product]:
        return self._products("/products/search", {"q": query, "limit": limit})

    def by_category(self, category: str, limit: int = 12) -> List[Product]:
        return self._products(f"/products/category/{quote(category, safe='')}", {"limit": limit})

    def get_product(self, product_id: int) -> Optional[Product]:
        r = self._get(f"/products/{product_id}")
        if r.status_code == 404:
            return None
        if not r.ok:
            raise CatalogError(f"catalog returned {r.status_code} for product {product_id}")
        try:
            return Product.from_api(r.json())
        except (ValueError, KeyError) as e:
            raise CatalogError(f"catalog returned a malformed product {product_id}") from e

    def categories(self) -> List[Dict[str, str]]:
        data = self._json("/products/categories") or []
        out = []
        for c in data:
            # older API versions return bare slugs
            if isinstance(c, str):
                c = {"slug": c, "name": c}
            if c.get("slug"):
                out.append({"slug": c["slug"], "name": c.get("name") or c["slug"]})
        return out
