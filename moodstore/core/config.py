"""Mood Store Configuration"""

import os
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Mood Store"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Storefront
    store_name: str = "Mood Store"
    currency_symbol: str = "$"
    express_shipping_fee: float = 9.99

    # Auth (tokens are issued by the hosted auth provider in production)
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_ttl_minutes: int = 60 * 24

    # SMTP for invoice emails
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None

    # Mood detection (mocked)
    mood_detection_delay: float = 2.0

    # Cart client
    store_base_url: str = "http://localhost:8000"
    cart_state_dir: str = os.path.join(os.path.expanduser("~"), ".moodstore")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def smtp_configured(self) -> bool:
        """Check if invoice emails can be sent"""
        return all([self.smtp_host, self.smtp_from])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
