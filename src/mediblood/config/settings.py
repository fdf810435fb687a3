"""
Configuration settings for the order desk.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Order desk configuration settings.

    All settings can be overridden via ``MEDIBLOOD_``-prefixed environment variables.
    """

    # Remote order store
    api_base_url: str = Field(
        default="http://localhost:5173",
        description="Base URL of the remote order store"
    )
    backend_enabled: bool = Field(
        default=True,
        description="Probe and use the remote order store at all"
    )
    health_path: str = Field(
        default="/api/health",
        description="Health endpoint probed once at startup"
    )
    orders_path: str = Field(
        default="/api/mediblood/orders",
        description="Collection endpoint for orders"
    )
    health_timeout: float = Field(
        default=0.65,
        description="Timeout in seconds for the startup health probe"
    )
    request_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for order requests"
    )

    # Local durable cache
    storage_path: str = Field(
        default="data/mediblood_storage.json",
        description="File backing the local key-value medium"
    )
    storage_quota_bytes: int = Field(
        default=5_000_000,
        description="Maximum size of the local medium"
    )
    local_orders_key: str = Field(
        default="medibloodOrdersV1",
        description="Key holding locally created records"
    )
    last_order_key: str = Field(
        default="medibloodLastOrderIdV1",
        description="Key holding the last submitted order id"
    )
    local_id_prefix: str = Field(
        default="MB",
        description="Prefix for locally generated order ids"
    )
    local_list_limit: int = Field(
        default=200,
        description="Maximum number of cached records returned by a listing"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    debug_mode: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_file: str = Field(
        default="logs/mediblood.log",
        description="Rotating log file used outside debug mode"
    )

    model_config = SettingsConfigDict(
        env_prefix="MEDIBLOOD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
