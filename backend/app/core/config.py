from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        protected_namespaces=(),
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    storage_root: Path = Field(default=Path("/data/nft"), alias="STORAGE_ROOT")
    public_base_url: str = Field(default="http://localhost/nft", alias="PUBLIC_BASE_URL")

    # Permissive default is meant for development only.
    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")

    max_upload_bytes: int = Field(default=800 * 1024 * 1024, gt=0, alias="MAX_UPLOAD_BYTES")
    file_owner: str | None = Field(default=None, alias="FILE_OWNER")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    return Settings()


SERVICE_NAME = "nft-upload-api"
SERVICE_VERSION = "0.2.0"
