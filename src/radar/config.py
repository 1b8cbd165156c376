"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

PaymentToken = Literal["usdc", "tmai"]
LogFormat = Literal["console", "json"]


class UpstreamSettings(BaseSettings):
    """Token Metrics data API connection settings."""

    model_config = SettingsConfigDict(env_prefix="TOKEN_METRICS_")

    api_key: SecretStr = SecretStr("")
    base_url: str = "https://api.tokenmetrics.com/v2"
    timeout_seconds: float = 30.0
    payment_token: PaymentToken = "usdc"
    signal_limit: int = 50  # upper bound per upstream call


class CacheSettings(BaseSettings):
    """Radar response cache parameters."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    ttl_seconds: float = 300.0  # 5 minute freshness window


class ServerSettings(BaseSettings):
    """HTTP server and background refresh configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080
    refresh_enabled: bool = False
    refresh_interval: int = 300  # seconds between background re-aggregations


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: LogFormat = "console"  # LOG_FORMAT=json for log shipping
    upstream: UpstreamSettings = UpstreamSettings()
    cache: CacheSettings = CacheSettings()
    server: ServerSettings = ServerSettings()
