# tutoring/core/config.py
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str = "your-super-secret-jwt-key-change-in-prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days

    DATABASE_URL: str = "sqlite:///./tutoring.db"

    # Single admin account, no table behind it
    ADMIN_PHONE: str = "01000000000"
    ADMIN_PASSWORD: str = "admin"
    ADMIN_NAME: str = "المدير"

    # Billing: lessons per paid "month". Shared by the mapper and the eligibility check.
    LESSONS_PER_MONTH: int = Field(8, gt=0)

    STUDENT_CACHE_TTL_MS: int = 10 * 60 * 1000
    PAYMENT_CACHE_TTL_MS: int = 5 * 60 * 1000
    CACHE_MAX_SIZE: int = 100
    CACHE_CLEANUP_INTERVAL_SECONDS: float = 120.0
    SCAN_DEBOUNCE_MS: int = 10 * 1000

    DB_MAX_RETRIES: int = 3
    DB_RETRY_DELAY_SECONDS: float = 1.0
    DB_TIMEOUT_SECONDS: float = 5.0
    DB_BREAKER_THRESHOLD: int = 5
    DB_BREAKER_COOLDOWN_SECONDS: float = 30.0

    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://127.0.0.1",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8000",
    ]

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


# Created ONCE
settings = Settings()
