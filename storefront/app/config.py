import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///storefront.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    # Comma-separated list
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT = int(os.getenv("APP_PORT", "8080"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # URL pagination defaults (?page=&limit=)
    DEFAULT_PAGE = 1
    DEFAULT_LIMIT = int(os.getenv("DEFAULT_LIMIT", "20"))
    MAX_LIMIT = int(os.getenv("MAX_LIMIT", "1000"))

    # Product grid page size
    CATALOG_PAGE_SIZE = int(os.getenv("CATALOG_PAGE_SIZE", "20"))
