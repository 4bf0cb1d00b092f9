"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import DashboardConfig, DEFAULT_API_URL


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment (1/true/yes/on)."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> DashboardConfig:
    """
    Load and validate dashboard configuration from environment variables.

    Reads from .env file in the project root. Every setting has a default,
    so an empty environment yields a dashboard pointed at the local backend.

    Environment variables:
        REVIEWS_API_URL: Base URL of the reviews backend
        LOG_LEVEL: Logging level
        DASHBOARD_DEMO_FALLBACK: Show demonstration data when the backend fails

    Returns:
        DashboardConfig: Validated configuration object

    Raises:
        SystemExit: If configuration is invalid
    """
    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    try:
        config = DashboardConfig(
            api_base_url=os.getenv("REVIEWS_API_URL", DEFAULT_API_URL),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            demo_fallback=_env_flag("DASHBOARD_DEMO_FALLBACK", True),
        )

        return config

    except ValidationError as e:
        print("❌ Configuration validation failed:", file=sys.stderr)
        print("\nPlease check your .env file. Invalid fields:", file=sys.stderr)

        for error in e.errors():
            field_path = " → ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  • {field_path}: {message}", file=sys.stderr)

        print("\nHint: Copy .env.example to .env and adjust the values.", file=sys.stderr)
        sys.exit(1)
