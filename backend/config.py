# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./fashion_pos.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 8

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Store details printed on receipts and labels
    STORE_NAME: str = "Fashion Arena"
    STORE_ADDRESS: str = "Opp. Prisma Mall Basement of Cafecito Grw Cantt."
    STORE_PHONE: str = "055-386577 / 0321-7456467"
    CURRENCY: str = "PKR"
    DEFAULT_CUSTOMER_NAME: str = "Cash Customer"

    # Bootstrap admin account, created at startup when both are set
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
