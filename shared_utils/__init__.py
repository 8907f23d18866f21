"""
Gazette Processing - Shared Utilities Package
Provides logging, configuration and file utilities for the gazette pipeline
"""

__version__ = "1.0.0"

from .constants import *
from .logger import GazetteLogger, get_logger
from .config_manager import (
    AppConfig, CleaningConfig, PathsConfig, ProcessingConfig, LoggingConfig,
    ConfigManager, get_config, get_config_manager
)
from .file_utils import FileInfo, FileManager, read_text_file, write_text_file

__all__ = [
    # Constants
    'PROJECT_NAME', 'DocumentEra', 'Messages',

    # Logger
    'GazetteLogger', 'get_logger',

    # Config
    'AppConfig', 'CleaningConfig', 'PathsConfig', 'ProcessingConfig', 'LoggingConfig',
    'ConfigManager', 'get_config', 'get_config_manager',

    # File utilities
    'FileInfo', 'FileManager', 'read_text_file', 'write_text_file',
]
