import os


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///zyvero.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    # Comma-separated list
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT = int(os.getenv("APP_PORT", "8080"))

    # Where the API keeps each browser's cart: "session" (cookie) or "database"
    CART_STORAGE = os.getenv("CART_STORAGE", "session")
    # Slot file used by the `flask cart` commands
    CART_FILE = os.getenv("CART_FILE", "instance/cart.json")
    RECENTLY_VIEWED_LIMIT = int(os.getenv("RECENTLY_VIEWED_LIMIT", "6"))

    CATALOG_API_URL = os.getenv("CATALOG_API_URL", "https://dummyjson.com")
    CATALOG_TIMEOUT = float(os.getenv("CATALOG_TIMEOUT", "5"))

    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    SITE_URL = os.getenv("SITE_URL", "http://localhost:3000")
    CURRENCY = os.getenv("CURRENCY", "usd")
