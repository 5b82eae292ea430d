# tasktracker/config.py
# Environment-aware configuration for the tasktracker backend

import os
import re
from datetime import timedelta
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")


def parse_duration(value: str) -> timedelta:
    """
    Parse a lifespan string such as "30s", "15m", "12h" or "7d".

    A bare integer is read as seconds.

    Raises:
        ValueError: If the string is not a recognised duration
    """
    match = re.fullmatch(r"\s*(\d+)\s*([smhd]?)\s*", value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount = int(match.group(1))
    unit = match.group(2) or "s"
    if unit == "d":
        return timedelta(days=amount)
    if unit == "h":
        return timedelta(hours=amount)
    if unit == "m":
        return timedelta(minutes=amount)
    return timedelta(seconds=amount)


# JWT and session configuration
DEFAULT_SECRET_KEY = "dev-secret-key-change-me"
SECRET_KEY = os.environ.get("SECRET_KEY", DEFAULT_SECRET_KEY)
ALGORITHM = "HS256"
TOKEN_LIFESPAN = parse_duration(os.environ.get("JWT_TOKEN_LIFESPAN", "1d"))
TOKEN_COOKIE_NAME = "token"

if IS_PROD and SECRET_KEY == DEFAULT_SECRET_KEY:
    raise RuntimeError("SECRET_KEY must be set in production")

# Database configuration
# DATABASE_URL takes precedence (managed Postgres)
# Falls back to SQLite for local development
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip()
DATABASE_PATH = os.environ.get("DATABASE_PATH", "tasktracker.db")

# Project created for every new account
DEFAULT_PROJECT_NAME = os.environ.get("DEFAULT_PROJECT_NAME", "My first tasks")

# CORS origins (expand for staging/prod)
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(origin.strip() for origin in extra_origins.split(",") if origin.strip())

# Database type detection
IS_POSTGRES = DATABASE_URL.startswith(("postgres://", "postgresql://"))

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Database: {'PostgreSQL' if IS_POSTGRES else 'SQLite (local dev)'}")
print(f"[CONFIG] Token lifespan: {TOKEN_LIFESPAN}")
