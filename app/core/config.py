# app/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from .env"""

    # === Database ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./delivery_tracker.db"
    DATABASE_TEST_URL: Optional[str] = None

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure database URL is safe for current environment"""
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env == "production" and ("localhost" in v or v.startswith("sqlite")):
            raise ValueError("Production environment cannot use a local database!")
        return v

    # === JWT ===
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # === CORS ===
    ALLOWED_ORIGINS: List[str] = ["http://localhost:8080", "http://127.0.0.1:8080", "http://localhost:5173"]
    ALLOWED_METHODS: List[str] = ["*"]
    ALLOWED_HEADERS: List[str] = ["*"]

    # === Chain provider ===
    CHAIN_PROVIDER: str = "mock"  # 'mock' | 'relayer'
    CHAIN_RELAYER_URL: Optional[str] = None
    CHAIN_RELAYER_API_KEY: Optional[str] = None
    CHAIN_CONTRACT_ADDRESS: str = "0x0000000000000000000000000000000000000000"
    CHAIN_REQUEST_TIMEOUT: float = 30.0
    CHAIN_AUTO_CONNECT: bool = False

    # === System ===
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # === Security ===
    BCRYPT_ROUNDS: int = 12

    # === Business Rules ===
    DEMO_SENDER_ADDRESS: str = "demo-address"
    ESTIMATED_DELIVERY_DAYS: int = 3
    RECENT_DELIVERIES_LIMIT: int = 10
    SEED_DEMO_DATA: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create a global settings instance
settings = Settings()
