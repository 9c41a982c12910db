"""
Settings for the relay.

Values come from environment variables prefixed with SOUNDSPROXY_, an
optional .env file, or the defaults below.

Example:
    export SOUNDSPROXY_PORT=9000
    export SOUNDSPROXY_UPSTREAM_TIMEOUT=10
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8223
DEFAULT_UPSTREAM_BASE_URL = "https://rms.api.bbc.co.uk"
DEFAULT_USER_AGENT = "soundsproxy/0.1"
DEFAULT_IMAGE_RECIPE = "288x288"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SOUNDSPROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default=DEFAULT_HOST, description="Address to listen on")
    port: int = Field(default=DEFAULT_PORT, description="Port to listen on")

    upstream_base_url: str = Field(
        default=DEFAULT_UPSTREAM_BASE_URL,
        description="Base URL of the programmes API",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent sent with every upstream request",
    )
    upstream_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for upstream, None leaves it to the transport",
    )

    image_recipe: str = Field(
        default=DEFAULT_IMAGE_RECIPE,
        description="Size substituted into {recipe} image URL templates",
    )


def get_settings() -> Settings:
    return Settings()
