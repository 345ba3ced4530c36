"""
Unit tests for Config
"""

import json
import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from farm_client.utils.config import (
    ApiConfig,
    Config,
    LoggingConfig,
    PollingConfig,
    StorageConfig,
)
from farm_client.utils.logging_setup import get_logger, parse_size, redact_tokens, setup_logging


ENV_VARS = [
    'FARM_API_BASE_URL', 'FARM_API_TIMEOUT', 'FARM_SESSION_FILE',
    'FARM_POLL_UNREAD_INTERVAL', 'FARM_POLL_WEATHER_INTERVAL',
    'LOG_LEVEL', 'LOG_FILE', 'LOG_MAX_SIZE', 'LOG_BACKUP_COUNT',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


def write_config(data) -> Path:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        json.dump(data, f)
        return Path(f.name)


def remove_handlers(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestConfig:
    """Test cases for configuration management"""

    def test_config_dataclasses(self):
        """Test configuration dataclass defaults"""
        api_config = ApiConfig()
        assert api_config.base_url == "http://localhost:5000/api"
        assert api_config.timeout == 30

        polling_config = PollingConfig()
        assert polling_config.unread_count_interval == 30
        assert polling_config.weather_alert_interval == 300

        logging_config = LoggingConfig()
        assert logging_config.level == "INFO"
        assert logging_config.file is None
        assert logging_config.max_bytes == 10 * 1024 * 1024
        assert logging_config.backup_count == 5

        storage_config = StorageConfig(session_file="~/farm/session.json")
        assert storage_config.path == Path.home() / "farm" / "session.json"

    def test_load_from_file_basic(self):
        """Test basic configuration file loading"""
        temp_path = write_config({
            "api": {"base_url": "https://farm.example.org/api", "timeout": 10},
            "storage": {"session_file": "/tmp/farm-session.json"},
            "polling": {"unread_count_interval": 15, "weather_alert_interval": 600},
            "logging": {"level": "DEBUG", "file": "farm.log", "max_size": "5MB", "backup_count": 3}
        })

        try:
            config = Config.load_from_file(temp_path)

            assert config.api.base_url == "https://farm.example.org/api"
            assert config.api.timeout == 10
            assert config.storage.session_file == "/tmp/farm-session.json"
            assert config.polling.unread_count_interval == 15
            assert config.polling.weather_alert_interval == 600
            assert config.logging.level == "DEBUG"
            assert config.logging.file == "farm.log"
            assert config.logging.max_bytes == 5 * 1024 * 1024
            assert config.logging.backup_count == 3
        finally:
            os.unlink(temp_path)

    def test_partial_file_uses_defaults(self):
        temp_path = write_config({"api": {"timeout": 12}})

        try:
            config = Config.load_from_file(temp_path)

            assert config.api.base_url == "http://localhost:5000/api"
            assert config.api.timeout == 12
            assert config.polling == PollingConfig()
        finally:
            os.unlink(temp_path)

    def test_load_from_file_with_env_override(self, monkeypatch):
        """Test configuration loading with environment variable override"""
        temp_path = write_config({"api": {"base_url": "http://file/api", "timeout": 10}})

        monkeypatch.setenv('FARM_API_BASE_URL', 'http://env/api')
        monkeypatch.setenv('FARM_API_TIMEOUT', '90')
        monkeypatch.setenv('FARM_POLL_UNREAD_INTERVAL', '5')
        monkeypatch.setenv('LOG_LEVEL', 'WARNING')

        try:
            config = Config.load_from_file(temp_path)

            assert config.api.base_url == "http://env/api"
            assert config.api.timeout == 90
            assert config.polling.unread_count_interval == 5
            assert config.logging.level == "WARNING"
        finally:
            os.unlink(temp_path)

    def test_dotenv_next_to_config(self, tmp_path, monkeypatch):
        # Registers the key with monkeypatch so teardown removes what .env sets
        monkeypatch.setenv('FARM_SESSION_FILE', 'unset')
        monkeypatch.delenv('FARM_SESSION_FILE')

        config_path = tmp_path / "farm.json"
        config_path.write_text("{}", encoding="utf-8")
        (tmp_path / ".env").write_text("FARM_SESSION_FILE=/srv/farm/session.json\n", encoding="utf-8")

        config = Config.load_from_file(config_path)

        assert config.storage.session_file == "/srv/farm/session.json"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('FARM_POLL_WEATHER_INTERVAL', '120')

        config = Config.from_env()

        assert config.api == ApiConfig()
        assert config.polling.weather_alert_interval == 120

    def test_validate_config(self):
        """Test configuration validation"""
        config = Config()
        assert config.validate() == True

        config.api.base_url = "localhost:5000/api"
        with pytest.raises(ValueError, match="must start with http"):
            config.validate()

        config.api.base_url = "http://localhost:5000/api"
        config.api.timeout = 0
        with pytest.raises(ValueError, match="API timeout must be positive"):
            config.validate()

        config.api.timeout = 30
        config.polling.unread_count_interval = -1
        with pytest.raises(ValueError, match="Unread count polling interval must be positive"):
            config.validate()

        config.polling.unread_count_interval = 30
        config.polling.weather_alert_interval = 0
        with pytest.raises(ValueError, match="Weather alert polling interval must be positive"):
            config.validate()

        config.polling.weather_alert_interval = 300
        config.logging.level = "LOUD"
        with pytest.raises(ValueError, match="Unknown log level"):
            config.validate()

    def test_validate_reports_every_problem(self):
        config = Config()
        config.api.timeout = 0
        config.storage.session_file = ""

        with pytest.raises(ValueError) as exc_info:
            config.validate()

        assert "API timeout must be positive" in str(exc_info.value)
        assert "Session file path is required" in str(exc_info.value)

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            Config.load_from_file(Path("/non/existent/config.json"))

    def test_invalid_json(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            f.write("{ invalid json }")
            temp_path = Path(f.name)

        try:
            with pytest.raises(json.JSONDecodeError):
                Config.load_from_file(temp_path)
        finally:
            os.unlink(temp_path)


class TestLogging:

    @pytest.mark.parametrize("value, expected", [
        ("10MB", 10 * 1024 ** 2),
        ("512KB", 512 * 1024),
        ("1.5GB", int(1.5 * 1024 ** 3)),
        ("2048", 2048),
    ])
    def test_parse_size(self, value, expected):
        assert parse_size(value) == expected

    def test_get_logger_namespace(self):
        assert get_logger('client').name == 'farm_client.client'

    def test_setup_logging_with_file(self, tmp_path):
        settings = LoggingConfig(level="DEBUG", file=str(tmp_path / "logs" / "farm.log"), max_size="1KB")

        logger = setup_logging(settings)
        try:
            assert logger.name == 'farm_client'
            assert logger.level == logging.DEBUG
            rotating = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
            assert len(rotating) == 1
            assert rotating[0].maxBytes == 1024
            assert (tmp_path / "logs").is_dir()
        finally:
            remove_handlers(logger)

    def test_setup_logging_replaces_handlers(self, tmp_path):
        logger = setup_logging(LoggingConfig(level="DEBUG", file=str(tmp_path / "farm.log")))
        try:
            logger = setup_logging(LoggingConfig(level="WARNING"))

            assert logger.level == logging.WARNING
            assert len(logger.handlers) == 1
            assert not isinstance(logger.handlers[0], RotatingFileHandler)
        finally:
            remove_handlers(logger)

    def test_tokens_redacted_in_log_file(self, tmp_path):
        log_file = tmp_path / "farm.log"
        logger = setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))
        try:
            get_logger('client').debug("Sending Authorization: Bearer %s", "secret-farmer-token")
            get_logger('session_store').info('Stored {"adminToken": "secret-admin-token"}')
        finally:
            remove_handlers(logger)

        content = log_file.read_text(encoding="utf-8")
        assert "secret-farmer-token" not in content
        assert "secret-admin-token" not in content
        assert "Bearer ***" in content

    @pytest.mark.parametrize("message, expected", [
        ("Authorization: Bearer abc.def", "Authorization: Bearer ***"),
        ("token=abc farmerId=7", "token=*** farmerId=7"),
        ("tokenExpired: True", "tokenExpired: True"),
    ])
    def test_redact_tokens(self, message, expected):
        assert redact_tokens(message) == expected


if __name__ == "__main__":
    pytest.main([__file__])
