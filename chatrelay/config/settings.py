"""Runtime settings."""

from __future__ import annotations

from types import MappingProxyType

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MODEL_ID = "@cf/aisingapore/gemma-sea-lion-v4-27b-it"

# Sent on every response, preflight included.
CORS_HEADERS = MappingProxyType(
    {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CHATRELAY_", extra="ignore")

    app_name: str = "ChatRelay"
    env: str = "dev"
    log_level: str = "info"
    # Only method/path/body size are logged at debug level unless this is on
    log_full_request_body: bool = False
    # empty string disables the rotating file handler
    log_file: str = "logs/chatrelay.log"
    host: str = "127.0.0.1"
    port: int = 8787

    model_id: str = DEFAULT_MODEL_ID

    workers_ai_base_url: str = "https://api.cloudflare.com/client/v4"
    workers_ai_account_id: str = ""
    workers_ai_api_token: str = ""
    upstream_timeout_seconds: float = Field(default=60.0, gt=0.0)
    upstream_max_connections: int = 100
    upstream_max_keepalive_connections: int = 20


settings = Settings()
