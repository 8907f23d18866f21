"""
Gazette Processing - Configuration Management System
Manages configuration from defaults, environment (.env) and a JSON file
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .constants import (
    CONFIG_FILE, ENV_FILE, PROJECT_NAME, PROJECT_VERSION,
    DOCUMENT_START_MARKER, SOURCE_STAMP_TOKENS, MIN_LINE_LENGTH, NOISE_LINE_PREFIX,
    SOURCE_DIR, DESTINATION_DIR, SERIALIZED_DIR, LOGS_DIR, COPY_SUFFIX,
    LOG_FILE_MAX_BYTES, LOG_BACKUP_COUNT
)

# Propagates into the pipeline logger's handlers
logger = logging.getLogger(f"{PROJECT_NAME}.config_manager")


@dataclass
class CleaningConfig:
    """Normalizer thresholds and noise literals"""
    header_marker: str = DOCUMENT_START_MARKER
    source_stamp_tokens: List[str] = field(default_factory=lambda: list(SOURCE_STAMP_TOKENS))
    min_line_length: int = MIN_LINE_LENGTH
    noise_line_prefix: str = NOISE_LINE_PREFIX


@dataclass
class PathsConfig:
    """Input, working copy, output and log locations"""
    source_dir: str = str(SOURCE_DIR)
    destination_dir: str = str(DESTINATION_DIR)
    output_dir: str = str(SERIALIZED_DIR)
    logs_dir: str = str(LOGS_DIR)


@dataclass
class ProcessingConfig:
    """Batch processing settings"""
    copy_suffix: str = COPY_SUFFIX
    file_pattern: str = "*"
    fallback_encoding: str = "utf-8"
    write_processing_log: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    file_max_bytes: int = LOG_FILE_MAX_BYTES
    backup_count: int = LOG_BACKUP_COUNT
    enable_json_logging: bool = True
    enable_console_logging: bool = True


@dataclass
class AppConfig:
    """Main application configuration combining all sub-configurations"""
    project_name: str = PROJECT_NAME
    version: str = PROJECT_VERSION
    environment: str = "development"

    cleaning: CleaningConfig = None
    paths: PathsConfig = None
    processing: ProcessingConfig = None
    logging: LoggingConfig = None

    def __post_init__(self):
        if self.cleaning is None:
            self.cleaning = CleaningConfig()
        if self.paths is None:
            self.paths = PathsConfig()
        if self.processing is None:
            self.processing = ProcessingConfig()
        if self.logging is None:
            self.logging = LoggingConfig()


class ConfigManager:
    """
    Central configuration manager
    Merges defaults, environment variables and the JSON config file, in that order
    """

    def __init__(self, config_file: Optional[Path] = None, env_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.env_file = Path(env_file) if env_file else ENV_FILE
        self.logger = logger
        self._config: Optional[AppConfig] = None

    def load_config(self, force_reload: bool = False) -> AppConfig:
        """
        Load configuration from all sources

        Args:
            force_reload: Force reload even if config is cached

        Returns:
            Complete application configuration
        """

        if self._config is not None and not force_reload:
            return self._config

        self.logger.info(f"Loading configuration from {self.config_file} (env: {self.env_file})")

        try:
            config_dict = asdict(AppConfig())

            env_config = self._load_from_env()
            config_dict = self._deep_merge(config_dict, env_config)

            if self.config_file.exists():
                json_config = self._load_from_json()
                config_dict = self._deep_merge(config_dict, json_config)
            else:
                self.logger.debug(f"Config file not found: {self.config_file}")

            self._config = self._dict_to_config(config_dict)
            self._validate_config(self._config)

            self.logger.info(f"Configuration loaded successfully: environment={self._config.environment}")

            return self._config

        except (TypeError, ValueError) as e:
            self.logger.error(f"Failed to load configuration: {str(e)}")
            # Defaults keep the pipeline usable
            self._config = AppConfig()
            return self._config

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""

        if self.env_file.exists():
            load_dotenv(self.env_file)

        env_config = {}

        if os.getenv('ENVIRONMENT'):
            env_config['environment'] = os.getenv('ENVIRONMENT')

        cleaning_config = {}
        if os.getenv('GAZETTE_HEADER_MARKER'):
            cleaning_config['header_marker'] = os.getenv('GAZETTE_HEADER_MARKER')
        if os.getenv('GAZETTE_SOURCE_STAMPS'):
            cleaning_config['source_stamp_tokens'] = [
                token.strip() for token in os.getenv('GAZETTE_SOURCE_STAMPS').split(',')
                if token.strip()
            ]
        if os.getenv('GAZETTE_MIN_LINE_LENGTH'):
            cleaning_config['min_line_length'] = int(os.getenv('GAZETTE_MIN_LINE_LENGTH'))
        if os.getenv('GAZETTE_NOISE_PREFIX'):
            cleaning_config['noise_line_prefix'] = os.getenv('GAZETTE_NOISE_PREFIX')
        if cleaning_config:
            env_config['cleaning'] = cleaning_config

        paths_config = {}
        if os.getenv('GAZETTE_SOURCE_DIR'):
            paths_config['source_dir'] = os.getenv('GAZETTE_SOURCE_DIR')
        if os.getenv('GAZETTE_DESTINATION_DIR'):
            paths_config['destination_dir'] = os.getenv('GAZETTE_DESTINATION_DIR')
        if os.getenv('GAZETTE_OUTPUT_DIR'):
            paths_config['output_dir'] = os.getenv('GAZETTE_OUTPUT_DIR')
        if os.getenv('GAZETTE_LOGS_DIR'):
            paths_config['logs_dir'] = os.getenv('GAZETTE_LOGS_DIR')
        if paths_config:
            env_config['paths'] = paths_config

        if os.getenv('GAZETTE_COPY_SUFFIX'):
            env_config['processing'] = {'copy_suffix': os.getenv('GAZETTE_COPY_SUFFIX')}

        if os.getenv('LOG_LEVEL'):
            env_config['logging'] = {'level': os.getenv('LOG_LEVEL').upper()}

        return env_config

    def _load_from_json(self) -> Dict[str, Any]:
        """Load configuration from JSON file"""

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in config file: {str(e)}")
            return {}
        except OSError as e:
            self.logger.error(f"Error reading config file: {str(e)}")
            return {}

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries"""

        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Convert dictionary to AppConfig object"""

        config_dict = dict(config_dict)
        cleaning_dict = config_dict.pop('cleaning', {})
        paths_dict = config_dict.pop('paths', {})
        processing_dict = config_dict.pop('processing', {})
        logging_dict = config_dict.pop('logging', {})

        return AppConfig(
            cleaning=CleaningConfig(**cleaning_dict),
            paths=PathsConfig(**paths_dict),
            processing=ProcessingConfig(**processing_dict),
            logging=LoggingConfig(**logging_dict),
            **config_dict
        )

    def _validate_config(self, config: AppConfig):
        """Validate configuration values"""

        validation_errors = []

        if config.cleaning.min_line_length < 0:
            validation_errors.append("Minimum line length cannot be negative")

        if not config.cleaning.header_marker:
            validation_errors.append("Header marker is empty; header trimming is disabled")

        if not config.processing.copy_suffix:
            validation_errors.append("Copy suffix is empty; source files would be cleaned in place")

        if validation_errors:
            self.logger.warning("Configuration validation failed: " + "; ".join(validation_errors))

    def get_config(self) -> AppConfig:
        """Get current configuration (loads if not already loaded)"""
        if self._config is None:
            return self.load_config()
        return self._config

    def save_config(self, config: AppConfig = None):
        """Save current configuration to JSON file"""

        config = config or self._config
        if config is None:
            raise ValueError("No configuration to save")

        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2, ensure_ascii=False)

        self.logger.info(f"Configuration saved to {self.config_file}")

    def get_value(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation (e.g., 'cleaning.min_line_length')

        Args:
            key_path: Dot-separated path to configuration value
            default: Default value if key not found

        Returns:
            Configuration value or default
        """

        value = self.get_config()
        for key in key_path.split('.'):
            if not hasattr(value, key):
                return default
            value = getattr(value, key)
        return value

    def set_value(self, key_path: str, value: Any):
        """
        Set configuration value using dot notation

        Args:
            key_path: Dot-separated path to configuration value
            value: Value to set
        """

        keys = key_path.split('.')
        target = self.get_config()

        for key in keys[:-1]:
            if hasattr(target, key):
                target = getattr(target, key)
            else:
                raise ValueError(f"Invalid configuration path: {key_path}")

        final_key = keys[-1]
        if hasattr(target, final_key):
            setattr(target, final_key, value)
        else:
            raise ValueError(f"Invalid configuration key: {final_key}")


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create global configuration manager"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> AppConfig:
    """Get current application configuration"""
    return get_config_manager().get_config()

