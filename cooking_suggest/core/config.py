import os
import secrets
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project root = the directory holding pyproject.toml
PROJECT_ROOT = Path(__file__).resolve().parents[2]

DATA_DIR = PROJECT_ROOT / "data"
DATABASE_PATH = Path(os.getenv("DATABASE_PATH", str(DATA_DIR / "cooking.sqlite3")))

# --- Version / build metadata (override via systemd env) ---
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
GIT_SHA = os.getenv("GIT_SHA", "unknown")
BUILD_DATE = os.getenv("BUILD_DATE", "unknown")

# OpenAI-compatible chat completions endpoint (Cerebras cloud by default)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.cerebras.ai/v1")
LLM_API_KEY = os.getenv("CEREBRAS_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "llama3.1-8b")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "800"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.8"))
LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "60"))

# Tokens signed with a throwaway secret do not survive a restart.
JWT_SECRET_FROM_ENV = bool(os.getenv("JWT_SECRET"))
JWT_SECRET = os.getenv("JWT_SECRET") or secrets.token_urlsafe(32)
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

PUBLIC_RECIPES_LIMIT = int(os.getenv("PUBLIC_RECIPES_LIMIT", "20"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
