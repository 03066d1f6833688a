"""
Configuration management using pydantic-settings.
All settings loaded from environment variables (12-factor app).
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="FaultLens", description="Service title")

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_reload: bool = Field(default=True, description="Enable hot reload")
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins (comma-separated)",
    )

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log format (json|console)")

    # Severity thresholds
    warning_temp: float = Field(default=50.0, description="Temperature above which a reading is a warning (C)")
    critical_temp: float = Field(default=60.0, description="Temperature above which a reading is critical (C)")
    warning_current: float = Field(default=2.0, description="Current above which a reading is a warning (A)")
    critical_current: float = Field(default=3.0, description="Current above which a reading is critical (A)")

    # Engine Configuration
    contribution_precision: int = Field(
        default=6, ge=1, le=12, description="Decimal places contributions are rounded to"
    )
    max_batch_size: int = Field(
        default=10000, ge=1, description="Largest accepted events/batch list"
    )

    # Development
    dev_mode: bool = Field(default=True, description="Development mode")
    debug: bool = Field(default=False, description="Debug mode")
    testing: bool = Field(default=False, description="Testing mode")

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, v: str) -> List[str]:
        """Parse comma-separated CORS origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def environment(self) -> str:
        """Short environment label for health reporting."""
        if self.testing:
            return "testing"
        return "development" if self.dev_mode else "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure singleton behavior.
    """
    return Settings()
