"""Application configuration read from the environment."""

import os
from os import getenv
from pathlib import Path

# Load .env before anything reads configuration
ENV_FILE_PATHS = [
    Path("/opt/omifem/.env"),
    Path(__file__).parent.parent / ".env",
]


def load_env_file_fallback() -> bool:
    """Load a .env file into os.environ without overriding existing values."""
    # Logging is not configured yet, so report with print
    for env_file in ENV_FILE_PATHS:
        if env_file.exists() and env_file.is_file():
            try:
                loaded_count = 0
                with open(env_file, "r") as f:
                    for line in f:
                        line = line.strip()
                        if not line or line.startswith("#"):
                            continue
                        if "=" in line:
                            key, value = line.split("=", 1)
                            key = key.strip()
                            value = value.strip()
                            if value.startswith('"') and value.endswith('"'):
                                value = value[1:-1]
                            elif value.startswith("'") and value.endswith("'"):
                                value = value[1:-1]
                            if key and value and key not in os.environ:
                                os.environ[key] = value
                                loaded_count += 1
                if loaded_count > 0:
                    print(f"[Omifem] Loaded {loaded_count} environment variables from {env_file}")
                return True
            except OSError as e:
                print(f"[Omifem] Warning: Could not load .env file from {env_file}: {e}")
    return False


if not getenv("DATABASE_URL"):
    load_env_file_fallback()


DEBUG = getenv("APP_DEBUG", "false").lower() == "true"

# Default DATABASE_URL is for local dev only (Docker Compose)
DATABASE_URL = getenv(
    "DATABASE_URL",
    "postgresql+asyncpg://postgres:postgres@db:5432/omifem"
)

# Google sign-in (optional)
GOOGLE_CLIENT_ID = getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = getenv("GOOGLE_CLIENT_SECRET")

# Accounts created with one of these emails start as admins
ADMIN_EMAILS = {
    email.strip().lower()
    for email in getenv("ADMIN_EMAILS", "").split(",")
    if email.strip()
}

SESSION_TTL_SECONDS = int(getenv("SESSION_TTL_SECONDS", str(30 * 24 * 3600)))

# Image hosting (optional, uploads fall back to a placeholder)
CLOUDINARY_CLOUD_NAME = getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_UPLOAD_PRESET = getenv("CLOUDINARY_UPLOAD_PRESET")
CLOUDINARY_FOLDER = getenv("CLOUDINARY_FOLDER", "omifemcuts")
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/600x800?text=Style+Image"

WHATSAPP_NUMBER = getenv("WHATSAPP_NUMBER", "2348032205341")

CATALOG_PAGE_SIZE = int(getenv("CATALOG_PAGE_SIZE", "9"))
CATALOG_PREFETCH = int(getenv("CATALOG_PREFETCH", "36"))


def image_hosting_configured() -> bool:
    """True when both Cloudinary settings are present."""
    return bool(CLOUDINARY_CLOUD_NAME and CLOUDINARY_UPLOAD_PRESET)
