# File: src/lms_assessment/config/settings.py
import os
import logging
from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./assessment.db")
SQL_ECHO = os.getenv("SQL_ECHO", "False") == "True"

# Institution timezone, used to read "today" for late detection and academic years
TIMEZONE = os.getenv("TIMEZONE", "UTC")

# Assignment file policy
DEFAULT_MAX_FILE_SIZE_BYTES = int(os.getenv("DEFAULT_MAX_FILE_SIZE_BYTES", str(10 * 1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

if DATABASE_URL.startswith("sqlite:///./"):
    logger.debug(f"Using local SQLite database: {DATABASE_URL}")
