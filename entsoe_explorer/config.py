#!/usr/bin/env python3
"""
Centralized configuration for the ENTSO-E explorer.
Loads configuration from environment variables.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from .constants import DEFAULT_DOMAIN

# Load environment variables from .env file if it exists
# Look for .env in parent directory (project root)
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
# If .env doesn't exist, assume env vars are already set (e.g., by Docker)

# ENTSO-E API configuration
ENTSOE_BASE_URL = os.getenv("ENTSOE_BASE_URL", "https://web-api.tp.entsoe.eu/api")
ENTSOE_SECURITY_TOKEN = os.getenv("ENTSOE_SECURITY_TOKEN")
ENTSOE_DOMAIN = os.getenv("ENTSOE_DOMAIN", DEFAULT_DOMAIN)
ENTSOE_REQUEST_TIMEOUT = int(os.getenv("ENTSOE_REQUEST_TIMEOUT", "30"))

# Display configuration (rows are rendered in this timezone, stored in UTC)
DISPLAY_TIMEZONE = os.getenv("ENTSOE_DISPLAY_TIMEZONE", "Europe/Paris")

# Step used when a Period carries a resolution code we don't know
DEFAULT_RESOLUTION_MINUTES = int(os.getenv("ENTSOE_DEFAULT_RESOLUTION_MINUTES", "60"))

if DEFAULT_RESOLUTION_MINUTES <= 0:
    raise ValueError(
        "Invalid ENTSOE_DEFAULT_RESOLUTION_MINUTES. "
        "Please set a positive number of minutes in .env file"
    )
