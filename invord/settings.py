import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
# Use Path objects for robust, OS-agnostic path handling.
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")

# --- Filename Configuration ---
REPORT_FILENAME_PREFIX = os.getenv("REPORT_FILENAME_PREFIX", "INVORD_")
REPORT_FILE_SUFFIXES = [".pdf", ".txt"]
OUTPUT_FILENAME_BASE = os.getenv("OUTPUT_FILENAME_BASE", "invord_parse")
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_FILENAME = "invord.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 3
LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Tail Recovery ---
# "tiered" is the column-counting recoverer; "legacy" is the strict positional
# high/low recoverer used by older exports.
TAIL_STRATEGY = os.getenv("TAIL_STRATEGY", "tiered").lower()

# --- Shared Business Logic ---
URGENT_WINDOW_DAYS = 5  # POs due within this many days need EDI + appointment
ARRIVAL_WINDOW_DAYS = 7
ATTENTION_DAYS_SUPPLY = 5
CRITICAL_DAYS_SUPPLY = 2

NO_EDI_REASON = "No EDI confirmation"
NO_APPOINTMENT_REASON = "No appointment"

# Minimum size of an extracted text blob before it is worth parsing.
MIN_EXTRACTED_TEXT_LENGTH = 100

# Special-order lines shorter than this are wrapped continuations
MIN_SPECIAL_ORDER_TOKENS = 6

# Item-line shape
MIN_ITEM_TOKENS = 6
ITEM_TAIL_WINDOW = 6
MIN_TAIL_DECIMALS = 2

SPECIAL_ORDER_MARKER = "S/O"

UNIT_CODES = [
    "CS",
    "EA",
    "BX",
    "PK",
    "BG",
    "DZ",
    "CT",
]

SLOT_WORDS = [
    "COOLER",
    "FREEZE",
    "DRY",
]

PO_STATUS_MARKERS = [
    "Conf:",
    "Pending",
    "Received",
]
