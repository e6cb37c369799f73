"""Application configuration and settings management."""

from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FLEET_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Fleet Compliance Engine API"
    api_prefix: str = "/api"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA timezone used by the default clock for time-of-day rules.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Vehicle compliance
    max_vehicle_age_years: int = Field(default=15, ge=0)
    alternative_window_start: str = Field(
        default="06:00",
        description="Earliest hour suggested when a daytime restriction blocks a trip.",
    )
    alternative_window_end: str = Field(
        default="22:00",
        description="Latest hour suggested when a daytime restriction blocks a trip.",
    )

    # Route compliance
    residential_curfew_start_hour: int = Field(default=23, ge=0, le=23)
    residential_curfew_end_hour: int = Field(default=7, ge=0, le=23)
    residential_curfew_penalty: float = Field(default=5000.0, ge=0.0)
    traffic_proximity_km: float = Field(default=1.0, ge=0.0)

    # Route optimisation heuristics
    reorder_min_stops: int = Field(default=3, ge=0)
    reorder_savings_ratio: float = Field(default=0.15, ge=0.0, le=1.0)
    reorder_minutes_per_km: float = Field(default=3.0, ge=0.0)
    reorder_litres_per_km: float = Field(default=0.1, ge=0.0)
    reorder_min_time_saving_minutes: float = Field(default=10.0, ge=0.0)
    traffic_delay_recovery_ratio: float = Field(default=0.6, ge=0.0, le=1.0)
    alternative_route_fuel_saving_litres: float = Field(default=0.5, ge=0.0)

    # Hub capacity
    hub_at_capacity_percent: float = Field(default=90.0, ge=0.0)
    hub_redirect_percent: float = Field(default=85.0, ge=0.0)
    hub_min_available_buffer: int = Field(default=2, ge=0)
    hub_storage_alert_percent: float = Field(default=80.0, ge=0.0)

    @field_validator("alternative_window_start", "alternative_window_end")
    @classmethod
    def _validate_clock(cls, value: str) -> str:
        hours, _, minutes = value.partition(":")
        if not (hours.isdigit() and minutes.isdigit() and int(hours) < 24 and int(minutes) < 60):
            raise ValueError(f"expected HH:MM, got '{value}'")
        return value

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
