# storefront/config.py
from functools import lru_cache
from pathlib import Path
from typing import ClassVar, List, Literal, Optional

from fastapi import Request
from pydantic_settings import BaseSettings

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    # Bearer tokens stay valid for a week
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # "memory" keeps everything in process-wide dicts, "sql" uses DATABASE_URL
    STORAGE_BACKEND: Literal["memory", "sql"] = "sql"
    SEED_CATALOG: bool = True

    UPLOAD_DIR: str = "static/uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    TAX_RATE: str = "0.10"

    FRONTEND_URL: Optional[str] = None
    # Comma separated list of accounts allowed to read every order
    BACK_OFFICE_EMAILS: str = ""
    LOG_LEVEL: str = "INFO"

    # Google service account used for the Drive backup and Sheets mirror
    GOOGLE_CLIENT_EMAIL: Optional[str] = None
    GOOGLE_PRIVATE_KEY: Optional[str] = None
    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    GOOGLE_DRIVE_FOLDER_ID: Optional[str] = None
    GOOGLE_SHEET_ID: Optional[str] = None
    GOOGLE_HTTP_TIMEOUT: float = 15.0

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

    @property
    def database_url(self) -> str:
        # Hosted Postgres hands out postgres://, SQLAlchemy wants postgresql://
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL

    @property
    def google_private_key(self) -> Optional[str]:
        if not self.GOOGLE_PRIVATE_KEY:
            return None
        return self.GOOGLE_PRIVATE_KEY.replace("\\n", "\n")

    @property
    def google_configured(self) -> bool:
        return bool(self.GOOGLE_CLIENT_EMAIL and self.GOOGLE_PRIVATE_KEY)

    @property
    def back_office_emails(self) -> List[str]:
        return [e.strip().lower() for e in self.BACK_OFFICE_EMAILS.split(",") if e.strip()]

    @property
    def origins(self) -> List[str]:
        origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


# Settings the running application was built with
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
