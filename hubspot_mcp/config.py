"""
Process configuration.

Values come from the environment; a local .env file is loaded first so
development setups don't need exported variables.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_API_BASE = "https://api.hubapi.com"
SERVER_NAME = "hubspot-mcp-server"
SERVER_VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    hubspot_api_key: str
    hubspot_api_base: str = DEFAULT_API_BASE
    hubspot_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings(
        hubspot_api_key=os.getenv("HUBSPOT_API_KEY", ""),
        hubspot_api_base=os.getenv("HUBSPOT_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        hubspot_timeout=float(os.getenv("HUBSPOT_TIMEOUT", "30")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
