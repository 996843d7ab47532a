# barbershop/config.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./barbershop.db"
    SEED_DEFAULTS: bool = True

    # Auth
    SECRET_KEY: str = "change-me-later"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # First super admin, created on startup when no user has that email yet
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Shop
    BUSINESS_NAME: str = "Barbearia"
    TIMEZONE: str = "America/Bahia"
    SHOP_WHATSAPP_NUMBER: str = "5571988335001"
    PIX_KEY: Optional[str] = "71988335001"
    # "copia e cola" payload shown with the QR code
    PIX_COPY_PASTE: Optional[str] = None

    # Booking rules
    DEFAULT_SLOT_INTERVAL: int = 30
    DEFAULT_SERVICE_DURATION: int = 30
    DEFAULT_SERVICE_BUFFER: int = 5
    BREAK_INCLUDES_BUFFER: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None


settings = Settings()
