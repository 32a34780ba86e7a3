"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources, in priority order:
#
#   1. **Environment variables** — e.g. CACHE_BACKEND=redis (always wins)
#   2. **.env file** — key=value lines in the project root .env file
#
# Field `redis_host` maps to env var `REDIS_HOST` automatically.
# Defaults below apply when neither source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """searchCache application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Cache ===
    # "memory" (single process) or "redis" (shared across workers).
    cache_backend: str = "memory"
    # Every key is written as "<cache_prefix>:search:<variant>".
    cache_prefix: str = "search_cache"
    cache_ttl_minutes: int = 30
    cache_max_size: int = 1000

    # === Redis ===
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0
    redis_pool_size: int = 10
    redis_max_retries: int = 3
    redis_socket_timeout: float = 3.0
    redis_connect_timeout: float = 5.0

    # === Upstream search ===
    openlibrary_base_url: str = "https://openlibrary.org"
    search_result_limit: int = 3
    upstream_timeout: float = 10.0

    # === App Config ===
    service_name: str = "custom-search-service"
    app_host: str = "0.0.0.0"
    app_port: int = 8080
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def cache_ttl_seconds(self) -> int:
        """TTL requested for every cache write."""
        return self.cache_ttl_minutes * 60
