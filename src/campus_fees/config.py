"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_FEES_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Campus Delivery Fee Engine"
    log_level: str = Field(default="INFO", description="Root log level for the fee engine.")
    rates_file: Optional[Path] = Field(
        default=None,
        description="JSON document with rate tables. Built-in defaults are used when unset.",
    )

    amap_base_url: str = Field(
        default="https://restapi.amap.com/v5/direction",
        description="Base URL of the map routing API used for walking/e-bike distances.",
    )
    amap_web_key: Optional[str] = Field(default=None, description="Web service key for the map routing API.")
    distance_timeout_seconds: float = Field(default=5.0, gt=0.0)
    distance_max_retries: int = Field(default=2, ge=0)
    distance_backoff_seconds: float = Field(default=0.5, ge=0.0)
    ebike_threshold_km: float = Field(
        default=3.0,
        ge=0.0,
        description="Straight-line distance above which e-bike routing is preferred over walking.",
    )
    default_distance_km: float = Field(
        default=1.0,
        ge=0.0,
        description="Distance assumed when every distance source fails.",
    )

    holiday_api_url: Optional[str] = Field(
        default=None,
        description="Overrides the holiday API URL from the rate tables.",
    )
    holiday_api_timeout_seconds: float = Field(default=10.0, gt=0.0)

    @field_validator("rates_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


settings = Settings()
