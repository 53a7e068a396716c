# cartify/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Common env vars (.env):
      - DATABASE_URL (Postgres or SQLite connection string)
      - JWT_SECRET (signing secret for bearer tokens)
      - ADMIN_EMAIL / ADMIN_PASSWORD (built-in admin account)

    Everything has a development default so the API boots locally
    against a SQLite file.
    """

    PROJECT_NAME: str = "Cartify API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./cartify.db"

    # Bearer tokens
    JWT_SECRET: str = "cartify-secret-key"
    JWT_ALG: str = "HS256"
    USER_TOKEN_EXPIRE_HOURS: int = 24
    ADMIN_TOKEN_EXPIRE_DAYS: int = 1

    # Built-in admin login (no user row behind it)
    ADMIN_EMAIL: str = "admin@cartify.com"
    ADMIN_PASSWORD: str = "Admin@2001"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    # Catalog paging
    DEFAULT_PAGE_SIZE: int = 12

    # Cart ceilings: set-quantity bound vs. "add from catalog" bound
    CART_LINE_MAX_QUANTITY: int = 50
    CART_INCREMENT_CEILING: int = 5

    # Gift card code -> percent off, applied at checkout
    GIFT_CARDS: dict[str, int] = {
        "CARTIFYECOMMERCE": 15,
        "NEWUSER": 10,
        "WELCOME5": 5,
    }

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
