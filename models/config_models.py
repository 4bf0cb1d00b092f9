"""Configuration models for validation using Pydantic."""

from pydantic import BaseModel, Field, field_validator


DEFAULT_API_URL = "http://localhost:8080/api"


class DashboardConfig(BaseModel):
    """Dashboard settings loaded from environment variables."""

    api_base_url: str = Field(default=DEFAULT_API_URL, description="Base URL of the reviews REST backend")
    request_timeout_seconds: float = Field(default=10.0, gt=0, description="Per-request timeout for backend calls")
    refresh_interval_seconds: float = Field(default=30.0, gt=0, description="Polling interval for the dashboard view")
    demo_fallback: bool = Field(default=True, description="Show the demonstration dataset when the backend fails")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate backend URL format and strip trailing slashes."""
        if not v:
            return DEFAULT_API_URL
        if not v.startswith(("http://", "https://")):
            raise ValueError("Reviews API URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper
