import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from config/.env
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    GEMINI_API_BASE: str = os.getenv(
        "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
    ).rstrip("/")

    # Fallback credential when the user leaves the key field blank
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")

    REQUEST_TIMEOUT: float = float(os.getenv("GEMINI_REQUEST_TIMEOUT", "120"))  # seconds

    # Replace the live key in the reproduction command with $GEMINI_API_KEY
    REDACT_API_KEY: bool = _env_flag("GEMINI_REDACT_API_KEY")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
