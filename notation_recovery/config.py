import logging
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(override=True)

log = logging.getLogger("notation_recovery")

# Application Config
MODEL_NAME = os.getenv("NOTATION_VISION_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")
# Image suffix -> media type sent with the vision request
SUPPORTED_EXTENSIONS = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
}
OUTPUT_DIR = Path(os.getenv("NOTATION_OUTPUT_DIR", "output"))
UPLOAD_DIR = Path(os.getenv("NOTATION_UPLOAD_DIR", "temp_uploads"))
LOG_LEVEL = os.getenv("NOTATION_LOG_LEVEL", "INFO").upper()

# Local recognition
TESSERACT_CMD = os.getenv("TESSERACT_CMD")
TESSERACT_WHITELIST = "abcdefghKQRBNOox012345678.-+=# "

# Remote vision fallback
VISION_FALLBACK_ENABLED = os.getenv("NOTATION_VISION_FALLBACK", "true").lower() not in {"0", "false", "no"}
MIN_VISION_TEXT_LENGTH = int(os.getenv("NOTATION_MIN_VISION_TEXT", "5"))

# Tracing
LANGCHAIN_TRACING_V2 = os.getenv("LANGCHAIN_TRACING_V2", "false").lower() == "true"
LANGCHAIN_PROJECT = os.getenv("LANGCHAIN_PROJECT", "NotationRecovery")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

if not GROQ_API_KEY:
    log.warning("GROQ_API_KEY is not set; the vision fallback will fail if it is needed.")
