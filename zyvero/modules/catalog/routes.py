from __future__ import annotations

from flask import Blueprint, current_app, request

from zyvero.app.common.errors import abort_json, upstream_error, validation_error
from zyvero.modules.cart.storage import request_storage
from zyvero.modules.catalog.client import CatalogClient, CatalogError
from zyvero.modules.catalog.recent import RecentlyViewed
from zyvero.modules.catalog.recommend import (
    SORT_KEYS,
    also_bought,
    build_recommendations,
    filter_products,
    similar_products,
    sort_products,
)

bp = Blueprint("catalog", __name__)

CATALOG_EXT = "zyvero.catalog"


def get_catalog() -> CatalogClient:
    client = current_app.extensions.get(CATALOG_EXT)
    if client is None:
        client = CatalogClient(
            current_app.config["CATALOG_API_URL"],
            timeout=current_app.config.get("CATALOG_TIMEOUT", 5.0),
        )
        current_app.extensions[CATALOG_EXT] = client
    return client


def _recent() -> RecentlyViewed:
    return RecentlyViewed(request_storage(), limit=current_app.config.get("RECENTLY_VIEWED_LIMIT", 6))


def _int_arg(name: str, default: int, max_value: int = 100) -> int:
    try:
        value = int(request.args.get(name, default))
    except (TypeError, ValueError):
        validation_error(f"{name} must be an integer")
    if value < 0:
        validation_error(f"{name} must be >= 0")
    return min(value, max_value)


def _sort_arg() -> str:
    key = (request.args.get("sort") or "recommended").strip()
    if key not in SORT_KEYS:
        validation_error("Unknown sort key", allowed=list(SORT_KEYS))
    return key


@bp.get("/products")
def list_products():
    q = (request.args.get("q") or "").strip()
    category = (request.args.get("category") or "").strip()
    limit = _int_arg("limit", 24)
    skip = _int_arg("skip", 0, max_value=10_000)

    catalog = get_catalog()
    try:
        if category:
            products = filter_products(catalog.by_category(category, limit=limit), q)
        elif q:
            products = catalog.search(q, limit=limit)
        else:
            products = catalog.list_products(limit=limit, skip=skip)
    except CatalogError as e:
        upstream_error("Product catalog", e)

    return {"products": [p.to_dict() for p in products], "count": len(products)}, 200


@bp.get("/products/recent")
def recent_products():
    return {"products": _recent().items()}, 200


@bp.get("/products/<int:product_id>")
def product_detail(product_id: int):
    try:
        product = get_catalog().get_product(product_id)
    except CatalogError as e:
        upstream_error("Product catalog", e)
    if product is None:
        abort_json(404, "not_found", "Product not found", {"id": product_id})

    _recent().record(product)
    return product.to_dict(), 200


@bp.get("/products/<int:product_id>/similar")
def product_similar(product_id: int):
    sort = _sort_arg()
    catalog = get_catalog()
    try:
        product = catalog.get_product(product_id)
        if product is None:
            abort_json(404, "not_found", "Product not found", {"id": product_id})
        products = similar_products(catalog.by_category(product.category, limit=12), product_id)
    except CatalogError as e:
        upstream_error("Product catalog", e)

    return {"products": [p.to_dict() for p in sort_products(products, sort)], "sort": sort}, 200


@bp.get("/products/<int:product_id>/also-bought")
def product_also_bought(product_id: int):
    catalog = get_catalog()
    try:
        product = catalog.get_product(product_id)
        if product is None:
            abort_json(404, "not_found", "Product not found", {"id": product_id})
        products = also_bought(catalog.list_products(limit=24, skip=24), product_id, product.category)
    except CatalogError as e:
        upstream_error("Product catalog", e)

    return {"products": [p.to_dict() for p in products]}, 200


@bp.get("/categories")
def categories():
    try:
        cats = get_catalog().categories()
    except CatalogError as e:
        upstream_error("Product catalog", e)
    return {"categories": cats}, 200


@bp.get("/recommendations")
def recommendations():
    q = (request.args.get("q") or "").strip()
    limit = _int_arg("limit", 12)
    try:
        products = get_catalog().list_products(limit=24)
    except CatalogError as e:
        upstream_error("Product catalog", e)

    recs = build_recommendations(products, q, limit=limit)
    return {"products": [p.to_dict() for p in recs], "query": q}, 200
