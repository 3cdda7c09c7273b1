"""Configuration for the content safety service."""
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_VERSION = "2024-09-01"


class SafetySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AZURE_CONTENT_SAFETY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Gus Marketplace Content Safety", description="Service name")
    endpoint: str = Field(
        default="", description="Detector base endpoint (empty disables moderation)"
    )
    subscription_key: SecretStr = Field(
        default=SecretStr(""), description="Detector subscription key (empty disables moderation)"
    )
    api_version: str = Field(default=DEFAULT_API_VERSION, description="Detector API version")
    request_timeout: float = Field(
        default=10.0, description="Timeout in seconds for detector and image download calls"
    )
    blocklist_names: list[str] = Field(
        default_factory=list, description="Blocklists applied to text analysis"
    )
    log_level: str = Field(default="INFO", description="Root logging level")


@lru_cache()
def get_settings() -> SafetySettings:
    """Return service settings."""
    return SafetySettings()
