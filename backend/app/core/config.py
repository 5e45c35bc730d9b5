from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_APP_URL = "http://localhost:8080"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    debug: bool = Field(default=False, alias="YOURTEXT_DEBUG")
    log_level: str = Field(default="INFO", alias="YOURTEXT_LOG_LEVEL")

    app_url: str = Field(default="", alias="YOURTEXT_APP_URL")
    app_host: str = Field(default="0.0.0.0", alias="YOURTEXT_APP_HOST")
    app_port: int = Field(default=8080, alias="YOURTEXT_APP_PORT")
    cors_allow_origins: list[str] = Field(default=["*"], alias="YOURTEXT_CORS_ALLOW_ORIGINS")

    minio_endpoint: str = Field(default="localhost:9000", alias="YOURTEXT_MINIO_ENDPOINT")
    minio_access_key: str = Field(default="minioadmin", alias="YOURTEXT_MINIO_ACCESS_KEY")
    minio_secret_key: str = Field(default="minioadmin", alias="YOURTEXT_MINIO_SECRET_KEY")
    minio_bucket_name: str = Field(default="yourtext", alias="YOURTEXT_MINIO_BUCKET_NAME")
    minio_use_ssl: bool = Field(default=False, alias="YOURTEXT_MINIO_USE_SSL")
    minio_region: str = Field(default="us-east-1", alias="YOURTEXT_MINIO_REGION")

    storage_timeout: float = Field(default=10.0, alias="YOURTEXT_STORAGE_TIMEOUT")
    storage_max_attempts: int = Field(default=3, alias="YOURTEXT_STORAGE_MAX_ATTEMPTS")

    content_max_length: int = Field(default=10000, alias="YOURTEXT_CONTENT_MAX_LENGTH")

    @property
    def public_base_url(self) -> str:
        """Base URL for links handed back to clients, without a trailing slash."""
        return self.app_url.strip().rstrip("/") or DEFAULT_APP_URL

    @property
    def storage_endpoint_url(self) -> str:
        endpoint = self.minio_endpoint.strip()
        if "://" in endpoint:
            return endpoint
        scheme = "https" if self.minio_use_ssl else "http"
        return f"{scheme}://{endpoint}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
