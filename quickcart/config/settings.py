import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application configuration settings."""

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./quickcart.db")
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
    DB_QUERY_TIMEOUT = float(os.getenv("DB_QUERY_TIMEOUT", "5"))
    DB_CREATE_TABLES = os.getenv("DB_CREATE_TABLES", "true").lower() == "true"

    # Admin back-office listings
    SNAPSHOT_LIST_LIMIT = int(os.getenv("SNAPSHOT_LIST_LIMIT", "20"))
    UPLOAD_LOG_LIMIT = int(os.getenv("UPLOAD_LOG_LIMIT", "20"))

    # API
    API_TITLE = "QuickCart API"
    API_VERSION = "1.0.0"


settings = Settings()
