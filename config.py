"""Configuration module for MedCopy"""
import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# API Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

# Azure OpenAI Configuration
AZURE_OPENAI_ENDPOINT = os.getenv("AZURE_AI_ENDPOINT")
AZURE_OPENAI_API_KEY = os.getenv("AZURE_AI_CREDENTIAL")
AZURE_OPENAI_DEPLOYMENT = os.getenv("AZURE_OPENAI_DEPLOYMENT")
AZURE_OPENAI_API_VERSION = os.getenv("AZURE_MODEL_VERSION", "2024-12-01-preview")

# Google Sheets Configuration
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_SPREADSHEET_ID = os.getenv("GOOGLE_SPREADSHEET_ID", "")
GOOGLE_APPS_SCRIPT_URL = os.getenv("GOOGLE_APPS_SCRIPT_URL", "")
SHEETS_API_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
SHEETS_REQUEST_TIMEOUT = 15  # seconds

# Database Configuration (local settings)
DB_PATH = os.getenv("DB_PATH", "medcopy_settings.db")

# Generation Configuration
DEFAULT_FORMAT = "LinkedIn Post"
MULTI_FORMAT_LABEL = "Multi-Format Exploder"
BATCH_COUNT_MIN = 1
BATCH_COUNT_MAX = 10
DEFAULT_BATCH_COUNT = 3
DRIFT_REWRITE_THRESHOLD = 85  # drift scores below this trigger a persona rewrite
SKIPPED_DRIFT_SCORE = 100  # sentinel for modes without drift evaluation
SUMMARIZER_DRIFT_SCORE = 95
PERSONA_EXCERPT_LENGTH = 100

# Array/object outputs fall back to empty on malformed JSON when enabled
LENIENT_JSON_PARSING = os.getenv("LENIENT_JSON_PARSING", "false").lower() in ("1", "true", "yes")

# Application Configuration
APP_TITLE = "MedCopy"
APP_DESCRIPTION = "Persona-driven medical content engine"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
