"""Application configuration.

Uses pydantic-settings for environment variable support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: APS_ACCESS_TOKEN, ELEMENT_BATCH_SIZE, LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )

    api_host: str = Field(default="127.0.0.1", description="API bind address")
    api_port: int = Field(default=8080, ge=1, le=65535, description="API port")

    # =========================================================================
    # Autodesk Platform Services
    # =========================================================================
    aps_base_url: str = Field(
        default="https://developer.api.autodesk.com",
        description="APS API base URL",
    )
    aps_graphql_path: str = Field(
        default="/aec/v1/graphql",
        description="AEC Data Model GraphQL endpoint path",
    )
    aps_rest_path: str = Field(
        default="/aec/v1",
        description="AEC Data Model REST root path",
    )
    aps_model_derivative_path: str = Field(
        default="/modelderivative/v2/designdata",
        description="Model Derivative design data path",
    )
    aps_access_token: str | None = Field(
        default=None,
        description="Bearer token for APS calls (issued by the auth collaborator)",
    )
    aps_request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for each outbound APS call",
    )

    # =========================================================================
    # Element Retrieval
    # =========================================================================
    element_batch_size: int = Field(
        default=1000,
        ge=1,
        le=5000,
        description="Elements requested per page",
    )
    element_max_batches: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum pages fetched per retrieval run",
    )
    element_split_batch_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Sub-batch size used when a page is rejected as too large",
    )
    element_fetch_concurrency: int = Field(
        default=1,
        ge=1,
        le=8,
        description="Concurrent page requests once the total is known",
    )
    element_tier_max_retries: int = Field(
        default=1,
        ge=0,
        le=1,
        description="Retries per request before a tier falls through",
    )
    allow_synthetic_elements: bool = Field(
        default=False,
        description="Allow placeholder elements when every API tier fails",
    )
    synthetic_element_count: int = Field(
        default=12,
        ge=1,
        le=200,
        description="Number of placeholder elements synthesized",
    )

    # =========================================================================
    # Embodied Carbon
    # =========================================================================
    carbon_high_coverage_pct: float = Field(default=90.0, ge=0, le=100)
    carbon_high_exact_match_pct: float = Field(default=70.0, ge=0, le=100)
    carbon_medium_coverage_pct: float = Field(default=70.0, ge=0, le=100)
    carbon_medium_exact_match_pct: float = Field(default=50.0, ge=0, le=100)
    carbon_default_factor: float = Field(
        default=100.0,
        gt=0,
        description="kgCO2e/kg used when the factor table has no generic entry",
    )
    carbon_default_density: float = Field(
        default=1000.0,
        gt=0,
        description="kg/m³ used when a material type has no density entry",
    )

    # =========================================================================
    # Viewer
    # =========================================================================
    native_viewer_path: str = Field(
        default="/viewer/native",
        description="Path of the native-format viewer",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_file: str | None = Field(default=None, description="Optional log file path")

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("aps_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Strip trailing slash so paths can be joined."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_quality_thresholds(self) -> Settings:
        """High-quality thresholds must not be looser than medium ones."""
        if self.carbon_high_coverage_pct < self.carbon_medium_coverage_pct:
            raise ValueError("carbon_high_coverage_pct must be >= carbon_medium_coverage_pct")
        if self.carbon_high_exact_match_pct < self.carbon_medium_exact_match_pct:
            raise ValueError(
                "carbon_high_exact_match_pct must be >= carbon_medium_exact_match_pct"
            )
        return self

    @property
    def graphql_url(self) -> str:
        """Absolute GraphQL endpoint."""
        return f"{self.aps_base_url}{self.aps_graphql_path}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
