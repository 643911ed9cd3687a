"""Runtime configuration loaded from environment variables (prefix ``TRAILSIDE_``)."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TRAILSIDE_", env_file=".env", extra="ignore")

    # Tried in order; the next one is used when a server fails
    overpass_servers: list[str] = [
        "https://overpass-api.de/api/interpreter",
        "https://overpass.kumi.systems/api/interpreter",
    ]
    user_agent: str = "trailside/1.0"
    http_timeout_s: float = Field(default=45.0, gt=0)
    # Server-side limit passed in the Overpass [timeout:] setting
    overpass_query_timeout_s: int = Field(default=30, gt=0)

    # None keeps the cache unbounded / non-expiring for the process lifetime
    cache_max_entries: Optional[int] = Field(default=None, gt=0)
    cache_ttl_s: Optional[float] = Field(default=None, gt=0)

    route_margin_deg: float = Field(default=0.001, ge=0)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
