# taskflow/config/settings.py
# Environment-driven configuration for the API, database and integrations

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings read from the environment"""

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskflow.db")

    # Authentication
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

    # CORS
    CORS_ORIGINS = _split_csv(os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
    ))

    # Purchase dashboard (Google Sheets)
    GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
    GOOGLE_SHEETS_SPREADSHEET_ID = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", "")
    PURCHASE_SUMMARY_SHEET = os.getenv("PURCHASE_SUMMARY_SHEET", "DFE for Task Management System")
    PURCHASE_INDENT_SHEET = os.getenv("PURCHASE_INDENT_SHEET", "Indents")
    PURCHASE_CACHE_TTL = int(os.getenv("PURCHASE_CACHE_TTL", 5 * 60))  # seconds
    SHEETS_TIMEOUT = float(os.getenv("SHEETS_TIMEOUT", 15))

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))
    RELOAD = os.getenv("RELOAD", "true").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def sheets_configured(cls) -> bool:
        """True when the purchase spreadsheet can be reached"""
        return bool(cls.GOOGLE_API_KEY and cls.GOOGLE_SHEETS_SPREADSHEET_ID)


settings = Settings()
