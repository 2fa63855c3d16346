"""
Configuration management for Kaksha Live backend.
Loads configuration from environment variables and .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in the backend directory or project root
BACKEND_DIR = Path(__file__).parent.parent
PROJECT_ROOT = BACKEND_DIR.parent
ENV_FILE = PROJECT_ROOT / ".env"

# Load .env file if it exists
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
else:
    # Also try loading from backend directory
    backend_env = BACKEND_DIR / ".env"
    if backend_env.exists():
        load_dotenv(backend_env)

# Base paths
BASE_DIR = PROJECT_ROOT
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)

# LLM provider (OpenAI-compatible REST API)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", None)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1")
CLASSIFIER_MODEL = os.getenv("CLASSIFIER_MODEL", "gpt-4o-mini")
ANSWER_MODEL = os.getenv("ANSWER_MODEL", "gpt-4o")
VISION_MODEL = os.getenv("VISION_MODEL", "gpt-4.1-mini")
TRANSCRIBE_MODEL = os.getenv("TRANSCRIBE_MODEL", "whisper-1")

# LLM call settings
LLM_TIMEOUT_SEC = float(os.getenv("LLM_TIMEOUT_SEC", "30"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))
LLM_RETRY_BASE_DELAY = float(os.getenv("LLM_RETRY_BASE_DELAY", "0.5"))
CLASSIFIER_TEMPERATURE = float(os.getenv("CLASSIFIER_TEMPERATURE", "0.0"))
CLASSIFIER_MAX_TOKENS = int(os.getenv("CLASSIFIER_MAX_TOKENS", "200"))
ANSWER_TEMPERATURE = float(os.getenv("ANSWER_TEMPERATURE", "0.4"))
ANSWER_MAX_TOKENS = int(os.getenv("ANSWER_MAX_TOKENS", "600"))
VISION_MAX_TOKENS = int(os.getenv("VISION_MAX_TOKENS", "500"))

# Triage settings
TRIAGE_POLICY = os.getenv("TRIAGE_POLICY", "two_stage")  # 'two_stage' | 'single_stage'
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "hindi")  # 'hindi' | 'english'
SUPPORTED_LANGUAGES = ("hindi", "english")

# Transcript settings
CONTEXT_WINDOW_SEC = float(os.getenv("CONTEXT_WINDOW_SEC", "120"))  # 2 minutes of class
DEDUP_TOLERANCE_SEC = float(os.getenv("DEDUP_TOLERANCE_SEC", "0.5"))
SENTENCE_GAP_SEC = float(os.getenv("SENTENCE_GAP_SEC", "2.0"))
RECENT_TOKEN_COUNT = int(os.getenv("RECENT_TOKEN_COUNT", "20"))
FEED_APPLY_TIMEOUT_SEC = float(os.getenv("FEED_APPLY_TIMEOUT_SEC", "5"))
SESSION_IDLE_TIMEOUT_SEC = float(os.getenv("SESSION_IDLE_TIMEOUT_SEC", "3600"))  # 0 disables expiry
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "200"))

# Exchange log
CHAT_LOG_PATH = Path(os.getenv("CHAT_LOG_PATH", str(DATA_DIR / "chat_logs.csv")))
ENABLE_CHAT_LOG = os.getenv("ENABLE_CHAT_LOG", "true").lower() == "true"

# API configuration
API_V1_PREFIX = "/api/v1"
# CORS origins can be comma-separated list in env var
CORS_ORIGINS_STR = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
CORS_ORIGINS = [origin.strip() for origin in CORS_ORIGINS_STR.split(",")]
