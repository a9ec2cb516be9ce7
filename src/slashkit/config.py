"""Application configuration.

Uses pydantic-settings ``BaseSettings`` sub-configs grouped under a top-level
``Settings`` model. Every value can be overridden by an environment variable
carrying the section's prefix, e.g. ``SLASHKIT_TOKEN`` or
``SLASHKIT_CACHE_BACKEND``.

Call ``load_settings()`` to read the environment again (tests do this after
patching env vars).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class ApplicationConfig(BaseSettings):
    model_config = {"env_prefix": "SLASHKIT_"}

    client_id: str | None = None
    public_key: str | None = None  # hex, as shown in the developer portal
    token: str | None = None
    timeout_ms: int = 2500
    remove_unregistered: bool = False
    api_base_url: str = "https://discord.com/api/v10"
    max_retries: int = 3


class CacheConfig(BaseSettings):
    model_config = {"env_prefix": "SLASHKIT_CACHE_"}

    backend: Literal["memory", "database", "none"] = "memory"
    ttl: int = 900  # seconds
    database_url: str = "sqlite+aiosqlite:///slashkit.db"


class ServerConfig(BaseSettings):
    model_config = {"env_prefix": "SLASHKIT_SERVER_"}

    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/interactions"
    log_format: Literal["json", "text"] = "json"
    # Disabling this skips signature checks entirely. Local testing only.
    verify_signatures: bool = True


class Settings(BaseModel):
    application: ApplicationConfig = ApplicationConfig()
    cache: CacheConfig = CacheConfig()
    server: ServerConfig = ServerConfig()


def load_settings() -> Settings:
    return Settings(
        application=ApplicationConfig(),
        cache=CacheConfig(),
        server=ServerConfig(),
    )
