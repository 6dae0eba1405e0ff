"""
Configuration settings for the Exam Evaluator application.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Base directories
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))

# Result store settings
STORAGE_KEY = os.getenv("STORAGE_KEY", "exam_evaluator_db")

# API settings
API_TITLE = "Exam Evaluator"
API_VERSION = "1.0.0"
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
DEBUG = os.getenv("DEBUG", "True").lower() in ("true", "1", "t")

# Gemini settings
API_KEY = os.getenv("API_KEY", "")
MODEL_NAME = os.getenv("MODEL_NAME", "gemini-2.5-flash")
EVALUATION_TEMPERATURE = float(os.getenv("EVALUATION_TEMPERATURE", 0.1))

# File upload settings
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 10 * 1024 * 1024))  # 10MB default
ALLOWED_UPLOAD_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}

# Report settings
REPORT_DATE_FORMAT = os.getenv("REPORT_DATE_FORMAT", "%d/%m/%Y")
REPORT_FILENAME_PREFIX = os.getenv("REPORT_FILENAME_PREFIX", "Class_Exam_Report")
