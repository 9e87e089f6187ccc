"""Storefront Service Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    # Commerce backend
    ctp_project_key: str = "demo_btcc"
    ctp_auth_url: str = "https://auth.europe-west1.gcp.commercetools.com"
    ctp_api_url: str = "https://api.europe-west1.gcp.commercetools.com"
    ctp_client_id: Optional[str] = None
    ctp_client_secret: Optional[str] = None
    ctp_scopes: Optional[str] = None

    # CMS
    contentful_space_id: Optional[str] = None
    contentful_access_token: Optional[str] = None
    contentful_preview_token: Optional[str] = None
    contentful_environment: str = "master"

    # Cart persistence (empty directory keeps carts in memory)
    cart_storage_dir: Optional[str] = None
    cart_storage_key: str = "bt-cart"
    cart_session_max_age_hours: float = 24

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def commerce_configured(self) -> bool:
        """Check if commerce credentials are configured"""
        return all([self.ctp_client_id, self.ctp_client_secret])

    @property
    def cms_configured(self) -> bool:
        """Check if CMS credentials are configured"""
        return bool(self.contentful_space_id and self.contentful_access_token)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
