"""
Backend Configuration

Loads environment variables and provides configuration settings.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env.local first (for local development), then .env as fallback
env_local = Path(__file__).parent / '.env.local'
env_file = Path(__file__).parent / '.env'

if env_local.exists():
    load_dotenv(env_local)
elif env_file.exists():
    load_dotenv(env_file)

# Codeforces API
CF_API_BASE = os.getenv("CF_API_BASE", "https://codeforces.com/api").rstrip("/")
CF_TIMEOUT = float(os.getenv("CF_TIMEOUT", "15"))
SUBMISSION_FETCH_COUNT = int(os.getenv("SUBMISSION_FETCH_COUNT", "1000"))

# Number of handles whose analytics are kept in memory
MAX_CACHED_USERS = int(os.getenv("MAX_CACHED_USERS", "256"))

# Server Config
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
BACKEND_HOST = os.getenv("BACKEND_HOST", "0.0.0.0")
BACKEND_PORT = int(os.getenv("BACKEND_PORT", "8000"))
