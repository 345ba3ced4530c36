"""
Configuration management for Farm Client

Handles loading and validation of configuration from JSON files and environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .logging_setup import parse_size


DEFAULT_BASE_URL = "http://localhost:5000/api"


@dataclass
class ApiConfig:
    """Backend API configuration"""
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 30


@dataclass
class StorageConfig:
    """Persistent session storage configuration"""
    session_file: str = "~/.farm_client/session.json"

    @property
    def path(self) -> Path:
        return Path(self.session_file).expanduser()


@dataclass
class PollingConfig:
    """Background polling configuration (seconds)"""
    unread_count_interval: int = 30
    weather_alert_interval: int = 300


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    file: Optional[str] = None
    max_size: str = "10MB"
    backup_count: int = 5

    @property
    def max_bytes(self) -> int:
        return parse_size(self.max_size)


@dataclass
class Config:
    """Main configuration class"""
    api: ApiConfig = field(default_factory=ApiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from JSON file with environment variable override"""

        # Load environment variables from .env file if it exists
        env_file = config_path.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return cls._build(data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Build configuration from defaults and environment variables only"""
        load_dotenv()
        return cls._build({})

    @classmethod
    def _build(cls, data: dict) -> 'Config':
        api_data = data.get('api', {})
        storage_data = data.get('storage', {})
        polling_data = data.get('polling', {})
        logging_data = data.get('logging', {})

        api_defaults = ApiConfig()
        api_config = ApiConfig(
            base_url=os.getenv('FARM_API_BASE_URL', api_data.get('base_url', api_defaults.base_url)),
            timeout=int(os.getenv('FARM_API_TIMEOUT', api_data.get('timeout', api_defaults.timeout)))
        )

        storage_config = StorageConfig(
            session_file=os.getenv(
                'FARM_SESSION_FILE',
                storage_data.get('session_file', StorageConfig().session_file)
            )
        )

        polling_defaults = PollingConfig()
        polling_config = PollingConfig(
            unread_count_interval=int(os.getenv(
                'FARM_POLL_UNREAD_INTERVAL',
                polling_data.get('unread_count_interval', polling_defaults.unread_count_interval)
            )),
            weather_alert_interval=int(os.getenv(
                'FARM_POLL_WEATHER_INTERVAL',
                polling_data.get('weather_alert_interval', polling_defaults.weather_alert_interval)
            ))
        )

        logging_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=os.getenv('LOG_LEVEL', logging_data.get('level', logging_defaults.level)),
            file=os.getenv('LOG_FILE', logging_data.get('file', logging_defaults.file)),
            max_size=os.getenv('LOG_MAX_SIZE', logging_data.get('max_size', logging_defaults.max_size)),
            backup_count=int(os.getenv(
                'LOG_BACKUP_COUNT',
                logging_data.get('backup_count', logging_defaults.backup_count)
            ))
        )

        return cls(
            api=api_config,
            storage=storage_config,
            polling=polling_config,
            logging=logging_config
        )

    def validate(self) -> bool:
        """Validate configuration values"""
        errors = []

        if not self.api.base_url.startswith(("http://", "https://")):
            errors.append("API base URL must start with http:// or https://")

        if self.api.timeout <= 0:
            errors.append("API timeout must be positive")

        if not self.storage.session_file:
            errors.append("Session file path is required")

        if self.polling.unread_count_interval <= 0:
            errors.append("Unread count polling interval must be positive")

        if self.polling.weather_alert_interval <= 0:
            errors.append("Weather alert polling interval must be positive")

        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        return True
