from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "BoxTrack"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = ""  # Loaded from environment, validated in model_validator
    database_echo: bool = False

    # Security
    secret_key: str = ""  # Loaded from environment, validated in model_validator
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:3000,http://localhost:4321"

    # Location tree
    location_max_depth: int = 5

    # Short identifiers
    mint_max_attempts: int = 5
    container_identifier_length: int = 10
    code_identifier_prefix: str = "QR-"
    code_identifier_length: int = 6

    # Code batches
    code_batch_min: int = 1
    code_batch_max: int = 100

    # Container listing
    container_page_size_max: int = 100

    @model_validator(mode="after")
    def validate_config(self) -> "Settings":
        """Validate required values and domain limits"""
        if not self.database_url:
            raise ValueError("DATABASE_URL is required. Set in environment or .env file.")
        if not self.secret_key:
            raise ValueError("SECRET_KEY is required. Generate with: openssl rand -hex 32")

        if self.location_max_depth < 1:
            raise ValueError("location_max_depth must be at least 1")
        if self.mint_max_attempts < 1:
            raise ValueError("mint_max_attempts must be at least 1")
        if self.code_batch_min < 1 or self.code_batch_min > self.code_batch_max:
            raise ValueError(
                f"Invalid code batch bounds [{self.code_batch_min}, {self.code_batch_max}]"
            )
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="allow", case_sensitive=False
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
