import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
DATA_DIR = BASE_DIR / os.getenv("DATA_DIR", "data")
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Filename Configuration ---
STORE_FILENAME = os.getenv("STORE_FILENAME", "products.json")
PURCHASES_FILENAME_PREFIX = os.getenv("PURCHASES_FILENAME_PREFIX", "purchases_")

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Output Toggles ---
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILENAME = os.getenv("LOG_FILENAME", "profit_tracker.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))

# --- Ownership ---
# Partitions the product store per user; the calculations never read it.
DEFAULT_OWNER_ID = os.getenv("OWNER_ID", "local")

# --- Shared Business Logic ---
# Default length of every ranking.
TOP_N = int(os.getenv("TOP_N", "5"))

# Markup applied when a lot is added without an explicit sale price.
DEFAULT_MARKUP_PCT = float(os.getenv("DEFAULT_MARKUP_PCT", "20"))

# The weekly buckets, in the order used for tie-breaking.
WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
