"""
Configuration management using Pydantic Settings.
Validates environment variables and provides type-safe configuration.
"""

from functools import lru_cache
from typing import Literal

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

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # Analysis defaults (used whenever a run omits a value)
    default_max_price: float = Field(default=500_000, gt=0)
    default_min_lot_area: float = Field(default=7_000, gt=0, description="Square feet")
    default_target_profit_margin: float = Field(default=20, gt=0, description="Percent")
    default_renovation_budget: float = Field(default=100_000, gt=0)
    analysis_max_workers: int = Field(default=1, ge=1, le=32)

    # Relay server
    relay_host: str = Field(default="127.0.0.1")
    relay_port: int = Field(default=3000, ge=1, le=65535)
    relay_timeout_seconds: float = Field(default=30, gt=0)
    cors_allowed_origins: str = Field(default="*", description="Comma separated origins")

    # City of Austin / Travis County ArcGIS endpoints
    gis_geocoder_url: str = Field(
        default="https://maps.austintexas.gov/arcgis/rest/services/Geocode/COA_Address_Locator/GeocodeServer/findAddressCandidates",
    )
    gis_parcel_url: str = Field(
        default="https://services.arcgis.com/0L95CJ0VTaxqcmED/arcgis/rest/services/TCAD_Parcels/FeatureServer/0/query",
    )
    gis_zoning_url: str = Field(
        default="https://maps.austintexas.gov/arcgis/rest/services/Shared/Zoning_1/MapServer/0/query",
    )
    gis_historic_url: str = Field(
        default="https://maps.austintexas.gov/arcgis/rest/services/Shared/HistoricDistricts_1/MapServer/0/query",
    )
    gis_timeout_seconds: float = Field(default=30, gt=0)
    gis_requests_per_minute: int = Field(default=30, ge=1)
    gis_cache_ttl_hours: int = Field(default=24, ge=0)
    gis_cache_file: str = Field(default="", description="Empty keeps the cache in memory")
    gis_fallback_lot_area: float = Field(default=8_000, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return v.upper().strip() if isinstance(v, str) else v

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
