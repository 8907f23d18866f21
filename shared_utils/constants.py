"""
Gazette Processing - Constants and Configuration
Contains all constant values, marker literals and shared configuration for the project
"""

from enum import Enum
from pathlib import Path
from typing import List

# ============================================================================
# PROJECT INFORMATION
# ============================================================================

PROJECT_NAME = "gazette_processing"
PROJECT_VERSION = "1.0.0"

# ============================================================================
# FILE PATHS AND DIRECTORIES
# ============================================================================

# Base project directory
BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"
LOGS_DIR = BASE_DIR / "logs"

# Data directories
SOURCE_DIR = BASE_DIR / "text_files"
DESTINATION_DIR = BASE_DIR / "text_files"
SERIALIZED_DIR = BASE_DIR / "serialized_files"

# Configuration files
CONFIG_FILE = CONFIG_DIR / "config.json"
ENV_FILE = BASE_DIR / ".env"

# Suffix appended to the stem of each working copy before in-place cleaning
COPY_SUFFIX = "_duplicate_cleaned"

PROCESSING_LOG_NAME = "processing_log.json"

# ============================================================================
# TEXT CLEANING CONSTANTS
# ============================================================================

# Everything before the first masthead is scanner/cover-page noise
DOCUMENT_START_MARKER = "FEDERAL NEGARIT GAZETTE"

# Watermark left on every page by the site the scans were taken from
SOURCE_STAMP_TOKENS: List[str] = ["chilot.me"]

# Lines shorter than this (after trimming) are OCR fragments
MIN_LINE_LENGTH = 3

# OCR renders the gazette seal as a line starting with this token
NOISE_LINE_PREFIX = "gA"

# ============================================================================
# STRUCTURE EXTRACTION CONSTANTS
# ============================================================================

class DocumentEra(Enum):
    """Structural schema of a gazette document"""
    PRE_2018 = "pre_2018"
    POST_2018 = "post_2018"
    UNKNOWN = "unknown"


PART_ONE_MARKER = "PART ONE"
DESCRIPTION_MARKER = "WHEREAS"
CONTENTS_MARKER = "CONTENTS"

# Closed set; an eleventh part is not recognized
PART_ORDINALS = (
    "ONE", "TWO", "THREE", "FOUR", "FIVE",
    "SIX", "SEVEN", "EIGHT", "NINE", "TEN",
)

TITLE_KEYWORD = "PROCLAMATION"

MAX_FILENAME_LENGTH = 100

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

LOG_LEVELS = {
    'DEBUG': 10,
    'INFO': 20,
    'WARNING': 30,
    'ERROR': 40,
    'CRITICAL': 50
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# ============================================================================
# MESSAGES
# ============================================================================

class Messages:
    """Log and console messages used across the pipeline"""

    PROCESSED_AND_CLEANED = "Processed and cleaned {name}"
    JSON_CREATED = "Successfully created JSON file: {path}"
    FILE_ERROR_CONTEXT = "An error occurred with file {path}"

    ERROR_COPY_FAILED = "Could not create working copy"
    ERROR_READ_FAILED = "Could not read document"

    WARNING_NO_INPUT = "No input files found to process"
