import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Falls back to a local SQLite file so the API can boot without Postgres
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dentalcare.db")

# Firebase Configuration (identity provider for bearer tokens)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Frontend base URL, used for CORS defaults
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    f"{FRONTEND_URL},http://localhost:3000",
).split(",")

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# Rate limiting (Redis backed). Disable only for local development/testing
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
BOOKING_RATE_LIMIT = int(os.getenv("BOOKING_RATE_LIMIT", "20"))
BOOKING_RATE_WINDOW_SECONDS = int(os.getenv("BOOKING_RATE_WINDOW_SECONDS", "3600"))
RECORD_RATE_LIMIT = int(os.getenv("RECORD_RATE_LIMIT", "120"))
RECORD_RATE_WINDOW_SECONDS = int(os.getenv("RECORD_RATE_WINDOW_SECONDS", "3600"))

# Clinic defaults applied when a doctor profile is created
DEFAULT_SESSION_DURATION = int(os.getenv("DEFAULT_SESSION_DURATION", "30"))
