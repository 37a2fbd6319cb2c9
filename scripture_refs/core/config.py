# scripture_refs/core/config.py
import os

from dotenv import load_dotenv

# Load .env
load_dotenv()

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# ---- VERSIFICATION ----
VERSIFICATION_RULES_PATH = os.getenv(
    "VERSIFICATION_RULES_PATH",
    os.path.join(PACKAGE_DIR, "config", "versification_rules.yml"),
)

# ---- REFERENCES ----
# Language assumed when no translation is given
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "eng")

# Largest text accepted by the detection and markup endpoints
DETECT_MAX_TEXT_CHARS = int(os.getenv("DETECT_MAX_TEXT_CHARS", "200000"))

# ---- API ----
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "5055"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

# ---- LOGGING ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
