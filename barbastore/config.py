# barbastore/config.py

from datetime import time

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SHOP_NAME: str = "Barba Store"

    BUSINESS_OPEN: time = time(9, 0)
    BUSINESS_CLOSE: time = time(18, 0)
    SLOT_MINUTES: int = 30

    STORE_PROVIDER: str = "memory"  # "memory" or "sql"
    DATABASE_URL: str = "sqlite:///./barber.db"
    DATABASE_ECHO: bool = False

    SECRET_KEY: str = "change-me-later"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    BCRYPT_ROUNDS: int = 12

    LOG_LEVEL: str = "INFO"


settings = Settings()
