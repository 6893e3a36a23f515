from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="SalonBook Availability Service")
    cors_origins: List[AnyHttpUrl] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )
    api_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    api_timeout: float = Field(
        default=10.0
    )
    api_token: str | None = Field(
        default=None
    )
    use_mock_data: bool = Field(
        default=True
    )
    cache_enabled: bool = Field(
        default=True
    )
    cache_ttl_seconds: float = Field(default=30.0, gt=0)
    cache_max_entries: int = Field(default=512, ge=1)
    timeline_start_hour: int = Field(default=8, ge=0, le=23)
    timeline_end_hour: int = Field(default=22, ge=1, le=24)
    slot_step_minutes: int = Field(default=15, ge=5, le=60)
    pixels_per_minute: int = Field(default=2, ge=1)
    default_booking_minutes: int = Field(default=60, ge=5)

    model_config = SettingsConfigDict(env_prefix="SALONBOOK_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("slot_step_minutes")
    def _step_divides_hour(cls, value: int) -> int:
        if 60 % value:
            raise ValueError("slot_step_minutes must divide 60")
        return value

    @model_validator(mode="after")
    def _check_timeline_window(self) -> "Settings":
        if self.timeline_end_hour <= self.timeline_start_hour:
            raise ValueError("timeline_end_hour must be after timeline_start_hour")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
