from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # CouchDB (key-value store)
    COUCHDB_HOST: str = "localhost"
    COUCHDB_PORT: int = 5984
    COUCHDB_USERNAME: str = "admin"
    COUCHDB_PASSWORD: str = ""
    COUCHDB_DATABASE: str = "hashblog"

    # Posts
    POST_KEY_PREFIX: str = "post:"
    DEFAULT_READ_TIME: str = "5 min read"
    DEFAULT_CATEGORY: str = "Uncategorized"

    # Client
    BLOG_API_URL: str = "http://localhost:8000"
    BLOG_API_TIMEOUT: float = 10.0

    # Admin API key, required on write routes
    HASHBLOG_API_KEY: str = ""

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def couchdb_url(self) -> str:
        return f"http://{self.COUCHDB_USERNAME}:{self.COUCHDB_PASSWORD}@{self.COUCHDB_HOST}:{self.COUCHDB_PORT}"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
