import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.0-flash")
LLM_RETRIES = int(os.getenv("LLM_RETRIES", "4"))
LLM_BACKOFF_BASE = float(os.getenv("LLM_BACKOFF_BASE", "0.5"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))

MYSQL_HOST = os.getenv("MYSQL_HOST", "127.0.0.1")
MYSQL_PORT = int(os.getenv("MYSQL_PORT", "3306"))
MYSQL_DB = os.getenv("MYSQL_DB", "brava")
MYSQL_USER = os.getenv("MYSQL_USER", "brava")
MYSQL_PASSWORD = os.getenv("MYSQL_PASSWORD", "")

# Alert threshold for the left/right differential, in degrees Celsius
DEFAULT_THRESHOLD = float(os.getenv("DEFAULT_THRESHOLD", "1.0"))
THRESHOLD_MIN = 0.5
THRESHOLD_MAX = 2.5
THRESHOLD_STEP = 0.1

DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID", "demo")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
