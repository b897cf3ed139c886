"""
Runtime configuration.

Values are module constants; anything deployment-specific can be overridden
through the environment (a local .env file is honoured).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).parent.parent
DATA_DIR = ROOT_DIR / "data"

CATALOG_SOURCE = os.getenv("CATALOG_SOURCE", str(DATA_DIR / "courses.json"))
CATALOG_KEY    = "courses"

LOG_DIR  = Path(os.getenv("LOG_DIR", str(ROOT_DIR / "logs")))
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# The level menu is fixed; it is not derived from the catalog.
LEVEL_OPTIONS = ("100", "200", "300", "400", "500", "600", "700")

LOAD_ERROR_MESSAGE = "Error loading courses. Please try again."
