from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://user:password@db:5432/protoplan"
    UVICORN_HOST: str = "0.0.0.0"
    UVICORN_PORT: int = 8000
    LOG_LEVEL: str = "info"
    LOG_DIR: Path = Path("logs")

    # Uploaded screen images live under STORAGE_DIR and are served at /storage
    STORAGE_DIR: Path = Path("storage")
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024
    THUMBNAIL_SIZE: int = 320

    SECRET_KEY: str = "dev-secret-change-me"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 3600

    PLAN_GENERATION_DELAY_SECONDS: float = 1.5

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    model_config = {
        "env_file": ".env"
    }


settings = Settings()
