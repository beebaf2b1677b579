from flask import Flask

from zyvero.modules.cart.routes import bp as cart_bp
from zyvero.modules.catalog.routes import bp as catalog_bp
from zyvero.modules.orders.routes import bp as orders_bp


def register_api_blueprints(app: Flask) -> None:
    app.register_blueprint(cart_bp, url_prefix="/api")
    app.register_blueprint(catalog_bp, url_prefix="/api")
    app.register_blueprint(orders_bp, url_prefix="/api")

    # Root API document
    @app.get("/api")
    def api_index():
        return {
            "name": "Zyvero API",
            "version": "0.1.0",
            "endpoints": {
                "cart": [
                    "/cart",
                    "/cart/items",
                    "/cart/items/<id>",
                    "/cart/items/<id>/increment",
                    "/cart/items/<id>/decrement",
                ],
                "catalog": [
                    "/products",
                    "/products/<id>",
                    "/products/<id>/similar",
                    "/products/<id>/also-bought",
                    "/products/recent",
                    "/categories",
                    "/recommendations",
                ],
                "orders": ["/checkout", "/stripe/session"],
            },
        }, 200
