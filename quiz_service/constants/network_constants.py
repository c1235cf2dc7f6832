"""Network configuration constants for the quiz service."""

import os

DEFAULT_HOST: str = os.environ.get("HOST", "0.0.0.0")
DEFAULT_PORT: int = int(os.environ.get("PORT", "3000"))
API_PREFIX: str = "/api"
ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in os.environ.get("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]
APP_ENV: str = os.environ.get("APP_ENV", "development")
