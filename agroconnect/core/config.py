from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_ENV_PATH = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_PATH),
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "AgroConnect Nigeria"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./agroconnect.db"

    # Hosted auth (tokens are issued elsewhere, we only verify them)
    AUTH_JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: Optional[str] = "authenticated"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SESSION_COOKIE_NAME: str = "sb-access-token"

    # CORS, comma separated
    BACKEND_CORS_ORIGINS: str = "http://localhost,http://localhost:3000"

    # Object storage
    STORAGE_ROOT: str = "storage"
    STORAGE_BUCKET: str = "product-images"
    STORAGE_PUBLIC_URL: str = "http://localhost:8000/storage"

    # Image limits
    MAX_IMAGE_SIZE_BYTES: int = 5 * 1024 * 1024
    MAX_IMAGES_PER_PRODUCT: int = 8
    MAX_TOTAL_IMAGE_BYTES: int = 25 * 1024 * 1024

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def bucket_path(self) -> Path:
        return Path(self.STORAGE_ROOT) / self.STORAGE_BUCKET


settings = Settings()
