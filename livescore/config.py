"""
Application configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL", "")
    if url:
        return url
    # Use /app/data in Docker, current dir otherwise
    db_path = os.getenv("DATABASE_PATH", "livescore.db")
    return f"sqlite:///{db_path}"


class Settings:
    """Settings from environment variables"""

    DATABASE_URL: str = _database_url()

    # JWT settings
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

    # Scoring
    COMMENTARY_LIMIT: int = int(os.getenv("COMMENTARY_LIMIT", "20"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Comma-separated extra origins
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")


settings = Settings()
