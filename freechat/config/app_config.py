from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class AppConfig(BaseSettings):
    """Application configuration settings."""

    # Environment
    app_env: str = Field("development")
    app_debug: bool = Field(False)
    app_host: str = Field("0.0.0.0")
    app_port: int = Field(8000)

    # Logging
    log_level: str = Field("INFO")
    log_file: Optional[str] = Field(None)

    # Usage gate
    daily_limit: int = Field(50)

    # Pseudo-streaming
    stream_delay_ms: int = Field(50)

    @field_validator("app_env")
    def validate_app_env(cls, value: str) -> str:
        if value not in ["development", "staging", "production"]:
            raise ValueError("APP_ENV must be development, staging, or production")
        return value

    @field_validator("log_level")
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("LOG_LEVEL must be a valid Loguru level")
        return level

    @field_validator("daily_limit")
    def validate_daily_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("DAILY_LIMIT must be positive")
        return value

    @field_validator("stream_delay_ms")
    def validate_stream_delay(cls, value: int) -> int:
        if value < 0:
            raise ValueError("STREAM_DELAY_MS must not be negative")
        return value

    @property
    def stream_delay(self) -> float:
        """Inter-chunk delay in seconds."""

        return self.stream_delay_ms / 1000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache()
def get_app_config() -> AppConfig:
    """Return a cached application configuration instance."""

    return AppConfig()
