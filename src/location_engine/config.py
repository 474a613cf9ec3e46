"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.domain import CountryBounds


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="LOCATION_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Booking Location Engine API"
    api_prefix: str = "/api"

    geocoding_provider: Literal["nominatim", "google", "mapbox"] = Field(
        default="nominatim",
        description="Geocoding backend. Only 'nominatim' is implemented.",
    )
    routing_provider: Literal["osrm", "google", "mapbox"] = Field(
        default="osrm",
        description="Routing backend. Only 'osrm' is implemented.",
    )
    api_keys: dict[str, str] = Field(
        default_factory=dict,
        description="Per-provider credentials, e.g. {\"google\": \"...\"}.",
    )
    default_country: str = Field(default="ID", description="ISO country code used to restrict geocoding.")
    default_language: str = "id"
    cache_enabled: bool = True
    cache_ttl: int = Field(default=3600, ge=0, description="Cache lifetime in seconds.")

    # Indonesia by default
    country_min_lat: float = -11.0
    country_max_lat: float = 6.0
    country_min_lng: float = 95.0
    country_max_lng: float = 141.0

    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "Booqing-Platform/1.0"
    nominatim_result_limit: int = Field(default=5, ge=1)
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    http_timeout_seconds: float = Field(default=10.0, gt=0.0)
    http_connect_timeout_seconds: float = Field(default=5.0, gt=0.0)

    provider_duration_buffer: float = Field(
        default=1.2,
        ge=1.0,
        description="Multiplier applied to provider durations for real-world conditions.",
    )
    fallback_minutes_per_km: float = Field(default=2.0, gt=0.0)
    optimizer_stop_buffer_minutes: int = Field(default=5, ge=0)
    fallback_per_km_surcharge: float = Field(
        default=5000.0,
        ge=0.0,
        description="Per-km rate used by the route optimizer when tenant settings are unavailable.",
    )
    resolve_max_workers: int = Field(default=8, ge=1)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @property
    def country_bounds(self) -> CountryBounds:
        return CountryBounds(
            min_lat=self.country_min_lat,
            max_lat=self.country_max_lat,
            min_lng=self.country_min_lng,
            max_lng=self.country_max_lng,
        )

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

    @field_validator("api_keys", mode="before")
    @classmethod
    def _parse_api_keys(cls, value: Any) -> dict[str, str]:
        """Accept a JSON object or `provider=key` pairs separated by commas."""
        if value is None or value == "":
            return {}
        if isinstance(value, dict):
            return {str(k).lower(): str(v) for k, v in value.items() if v}
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, dict):
                    return {str(k).lower(): str(v) for k, v in parsed.items() if v}
            except json.JSONDecodeError:
                pass
            pairs = [item.split("=", 1) for item in value.split(",") if "=" in item]
            return {name.strip().lower(): key.strip() for name, key in pairs if key.strip()}
        raise ValueError("api_keys must be a mapping of provider name to key")

    @field_validator("default_country")
    @classmethod
    def _normalize_country(cls, value: str) -> str:
        return value.strip().upper()


settings = Settings()
