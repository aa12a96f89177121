"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings pulled from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend API
    api_base_url: str = "https://adstxt-manager.jp"
    api_timeout: int = Field(30000, gt=0)
    """Request timeout in milliseconds."""

    api_retries: int = Field(3, ge=0)
    """Additional attempts for timeouts and 5xx responses."""

    api_retry_base_delay: float = Field(1.0, ge=0)
    """Backoff base in seconds; attempt N waits base * 2**N."""

    api_key: str | None = None
    """Backend credential. Calls fail without it, but startup only warns."""

    # App
    log_level: str = "INFO"

    # MCP
    mcp_server_name: str = "adstxt-manager"
    mcp_server_version: str = "0.1.0"

    # HTTP / SSE transport
    sse_host: str = "0.0.0.0"
    sse_port: int = 8000

    @property
    def user_agent(self) -> str:
        return f"adstxt-mcp-server/{self.mcp_server_version}"


settings = Settings()
