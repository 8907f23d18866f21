"""
Gazette Processing - Logging System
Console, rotating file, error file and JSON-lines logging for the pipeline
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import (
    LOGS_DIR, LOG_LEVELS, LOG_FORMAT, LOG_DATE_FORMAT,
    LOG_FILE_MAX_BYTES, LOG_BACKUP_COUNT, PROJECT_NAME
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including keyword extras"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'extra_data'):
            log_entry.update(record.extra_data)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class GazetteLogger:
    """
    Main logging class for the gazette pipeline
    Writes to stdout and to log files under the configured log directory
    """

    def __init__(self, name: str = PROJECT_NAME, level: str = "INFO",
                 log_dir: Optional[Union[str, Path]] = None,
                 enable_console: bool = True, enable_json: bool = True,
                 max_bytes: int = LOG_FILE_MAX_BYTES, backup_count: int = LOG_BACKUP_COUNT):
        self.name = name
        self.level = level
        self.log_dir = Path(log_dir) if log_dir else LOGS_DIR
        self.enable_console = enable_console
        self.enable_json = enable_json
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup and configure the logger"""

        logger = logging.getLogger(self.name)
        logger.setLevel(LOG_LEVELS.get(self.level.upper(), logging.INFO))

        # Drop handlers left by a previous instance with the same name
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

        self.log_dir.mkdir(parents=True, exist_ok=True)
        standard_formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)
        file_stem = self.name.replace(' ', '_')

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(standard_formatter)
            logger.addHandler(console_handler)

        file_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{file_stem}.log",
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(standard_formatter)
        logger.addHandler(file_handler)

        # Errors only
        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{file_stem}_errors.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(standard_formatter)
        logger.addHandler(error_handler)

        if self.enable_json:
            json_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"{file_stem}_structured.jsonl",
                maxBytes=20 * 1024 * 1024,  # 20MB
                backupCount=3,
                encoding='utf-8'
            )
            json_handler.setLevel(logging.INFO)
            json_handler.setFormatter(JSONFormatter())
            logger.addHandler(json_handler)

        return logger

    def debug(self, message: str, **kwargs):
        """Log debug message"""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message"""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message"""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message"""
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message"""
        self._log(logging.CRITICAL, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs):
        extra = {}
        if kwargs:
            extra['extra_data'] = kwargs
        self.logger.log(level, message, extra=extra)

    def log_document_processing(self, document_name: str, status: str,
                                details: Dict[str, Any] = None):
        """Specialized logging for document processing"""
        message = f"Document processing: {document_name} - {status}"

        extra_data = {
            'document_name': document_name,
            'processing_status': status,
            'details': details or {}
        }

        if status.lower() in ['error', 'failed']:
            self.error(message, **extra_data)
        else:
            self.info(message, **extra_data)

    def close(self):
        """Flush and detach all handlers"""
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
            handler.close()


# Loggers created so far, keyed by name
_loggers: Dict[str, GazetteLogger] = {}


def get_logger(name: str = None, level: str = "INFO",
               log_dir: Optional[Union[str, Path]] = None) -> GazetteLogger:
    """
    Get or create a logger instance

    Args:
        name: Logger name (defaults to project name)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files (defaults to LOGS_DIR)

    Returns:
        GazetteLogger instance
    """
    logger_name = name or PROJECT_NAME
    existing = _loggers.get(logger_name)

    if existing is None or (log_dir is not None and Path(log_dir) != existing.log_dir):
        _loggers[logger_name] = GazetteLogger(logger_name, level, log_dir)

    return _loggers[logger_name]

