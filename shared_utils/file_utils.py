"""
Gazette Processing - File Utilities
Provides utilities for file operations and encoding-aware text reading
"""

import hashlib
import logging
import mimetypes
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import chardet

from .constants import PROJECT_NAME

# Propagates into the pipeline logger's handlers
module_logger = logging.getLogger(f"{PROJECT_NAME}.file_utils")


class FileInfo:
    """Container for file information"""

    def __init__(self, file_path: Union[str, Path]):
        self.path = Path(file_path)
        self.name = self.path.name
        self.stem = self.path.stem
        self.suffix = self.path.suffix.lower()
        self.size = self.path.stat().st_size if self.path.exists() else 0
        self.modified_time = datetime.fromtimestamp(
            self.path.stat().st_mtime
        ) if self.path.exists() else None
        self.mime_type = mimetypes.guess_type(str(self.path))[0]
        self.encoding = None
        self.hash = None

    def calculate_hash(self, algorithm: str = 'md5') -> str:
        """Calculate file hash"""
        if not self.path.exists():
            return ""

        hash_func = hashlib.new(algorithm)
        with open(self.path, 'rb') as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hash_func.update(chunk)

        self.hash = hash_func.hexdigest()
        return self.hash

    def detect_encoding(self) -> Optional[str]:
        """Detect file encoding from the first 10KB"""
        if not self.path.exists():
            return None

        with open(self.path, 'rb') as f:
            raw_data = f.read(10000)

        if not raw_data:
            return None

        result = chardet.detect(raw_data)
        self.encoding = result.get('encoding')
        return self.encoding

    def to_dict(self) -> Dict[str, Any]:
        """Convert file info to dictionary"""
        return {
            'name': self.name,
            'stem': self.stem,
            'suffix': self.suffix,
            'size': self.size,
            'modified_time': self.modified_time.isoformat() if self.modified_time else None,
            'mime_type': self.mime_type,
            'encoding': self.encoding,
            'hash': self.hash,
            'path': str(self.path)
        }


def read_text_file(file_path: Union[str, Path], fallback_encoding: str = 'utf-8') -> str:
    """
    Read a text file, best effort

    OCR output arrives in assorted encodings; the detected encoding is tried
    first and undecodable bytes are dropped on the fallback path.
    """
    file_info = FileInfo(file_path)
    encoding = file_info.detect_encoding() or fallback_encoding

    try:
        with open(file_info.path, 'r', encoding=encoding) as file:
            return file.read()
    except (UnicodeDecodeError, LookupError):
        module_logger.warning(
            f"Used fallback encoding with error handling: {file_info.path} (detected {encoding})"
        )
        with open(file_info.path, 'r', encoding=fallback_encoding, errors='ignore') as file:
            return file.read()


def write_text_file(file_path: Union[str, Path], content: str) -> Path:
    """Write text as UTF-8, replacing any existing content"""
    path = Path(file_path)
    with open(path, 'w', encoding='utf-8') as file:
        file.write(content)
    return path


class FileManager:
    """File management utilities"""

    def __init__(self, logger=None):
        self.logger = logger or module_logger

    def create_directory(self, directory: Union[str, Path], exist_ok: bool = True) -> bool:
        """Create directory with error handling"""

        try:
            Path(directory).mkdir(parents=True, exist_ok=exist_ok)
            self.logger.debug(f"Directory created: {directory}")
            return True
        except OSError as e:
            self.logger.error(f"Failed to create directory {directory}: {str(e)}")
            return False

    def copy_file(self, source: Union[str, Path], destination: Union[str, Path],
                  overwrite: bool = False) -> bool:
        """Copy file with error handling"""

        source_path = Path(source)
        dest_path = Path(destination)

        if not source_path.exists():
            self.logger.error(f"Source file not found: {source_path}")
            return False

        if dest_path.exists() and not overwrite:
            self.logger.warning(f"Destination exists and overwrite is False: {dest_path}")
            return False

        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_path, dest_path)
            self.logger.debug(f"File copied: {source_path} -> {dest_path}")
            return True

        except OSError as e:
            self.logger.error(f"Failed to copy file: {str(e)}")
            return False

    def find_files(self, directory: Union[str, Path], pattern: str = "*",
                   recursive: bool = False) -> List[Path]:
        """Find files matching pattern, sorted by path"""

        directory = Path(directory)

        if not directory.exists():
            self.logger.error(f"Directory not found: {directory}")
            return []

        search_func = directory.rglob if recursive else directory.glob
        files = sorted(f for f in search_func(pattern) if f.is_file())

        self.logger.debug(f"Found {len(files)} files matching pattern '{pattern}'")
        return files

