import os
import sys
import logging
import logging.config

# Detect environment (default to production)
APP_ENV = os.getenv("APP_ENV", "production").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Cloud board service (async driver)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./hottakes_cloud.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))

# On-device store (sync driver)
LOCAL_DATABASE_URL = os.getenv("LOCAL_DATABASE_URL", "sqlite:///./hottakes_local.db")

REMOTE_API_URL = os.getenv("REMOTE_API_URL", "http://localhost:8000")
REMOTE_TIMEOUT = float(os.getenv("REMOTE_TIMEOUT", "10"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging, preferring logging.conf when present."""
    if os.path.exists("logging.conf"):
        logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
        return

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
