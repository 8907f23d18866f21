"""
JSON Formatter

Role: Serialize extracted DocumentRecords to per-document JSON files named
after the document title.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

from shared_utils.constants import SERIALIZED_DIR, MAX_FILENAME_LENGTH
from shared_utils.logger import get_logger

from .structure_extractor import DocumentRecord


def title_to_filename(title: str) -> str:
    """
    Lowercased, underscore-joined slug of a title

    Args:
        title: Document title

    Returns:
        Filename stem, empty when the title has no usable characters
    """
    if not title:
        return ""

    slug = re.sub(r'\s+', '_', title.strip()).lower()
    # Cleaned titles are already alphanumeric; raw ones may not be
    slug = re.sub(r'[^\w.-]', '_', slug)
    slug = re.sub(r'_{2,}', '_', slug).strip('_.')

    return slug[:MAX_FILENAME_LENGTH]


class JsonFormatter:
    """Formatter for writing document records as JSON files."""

    def __init__(self, out_dir: Optional[Path] = None, logger=None):
        """
        Initialize the JSON formatter.

        Args:
            out_dir: Output directory for JSON files. Defaults to SERIALIZED_DIR.
            logger: Logger to report through. Defaults to the project logger.
        """
        self.out_dir = Path(out_dir or SERIALIZED_DIR)
        self.logger = logger or get_logger()

    def build_document_json(self, record: DocumentRecord) -> Dict[str, Any]:
        """Canonical JSON shape: title, description, parts."""
        return record.to_dict()

    def save_document(self, record: DocumentRecord, fallback_name: str = "document") -> Path:
        """
        Save a document record to <out_dir>/<title slug>.json

        Args:
            record: Extracted document record
            fallback_name: Filename stem used when the title gives no slug

        Returns:
            Path to the saved file
        """
        file_stem = title_to_filename(record.title) or title_to_filename(fallback_name) or "document"
        file_path = self.out_dir / f"{file_stem}.json"

        self.out_dir.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.build_document_json(record), f, ensure_ascii=False, indent=2)

        self.logger.debug(f"Document saved: {file_path.name}", parts=len(record.parts))
        return file_path

    def validate_json_output(self, file_path: Path) -> bool:
        """
        Validate that a JSON file is UTF-8 and has the record shape.

        Args:
            file_path: Path to JSON file to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.error(f"JSON validation failed for {file_path}: {e}")
            return False

        valid = (
            isinstance(data, dict)
            and set(data) == {"title", "description", "parts"}
            and isinstance(data["parts"], dict)
        )
        if not valid:
            self.logger.error(f"JSON validation failed for {file_path}: unexpected shape")
        return valid
