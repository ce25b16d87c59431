"""
Shared configuration management for the Community Platform services.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="COMMUNITY_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment")
    log_level: str = Field(default="info", description="Root log level")

    # Redis
    redis_url: str = Field(default="redis://localhost:6379/0", description="Cache store URL")
    redis_connect_timeout: float = Field(default=5.0, gt=0)
    redis_socket_timeout: float = Field(default=5.0, gt=0)

    # Cache policy
    cache_default_ttl: int = Field(default=3600, gt=0, description="TTL for list/detail reads")
    cache_scan_count: int = Field(default=500, gt=0, description="SCAN batch hint for pattern deletes")
    cache_key_prefix: Optional[str] = Field(default=None, description="Namespace prepended to every cache key")

    # Observability
    enable_metrics: bool = Field(default=True)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
