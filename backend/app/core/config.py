"""Application configuration using Pydantic settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Gus Marketplace", description="Service name")
    listing_ttl_days: int = Field(default=30, description="Days a listing stays visible")
    image_bucket: str = Field(
        default="gus-market-listing-imgs", description="Bucket holding listing images"
    )
    image_region: str = Field(default="us-east-2", description="Region of the image bucket")
    upload_url_ttl_hours: int = Field(
        default=15, description="Lifetime of pre-signed image upload grants"
    )
    email_sender: str = Field(
        default="Gus <system@gusmarketplace.com>", description="From address for outbound email"
    )
    contact_us_recipient: str = Field(
        default="", description="Recipient of Contact Us messages (required to send them)"
    )


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings instance."""
    return AppSettings()
