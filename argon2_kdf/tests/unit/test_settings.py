############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# test_settings.py: Unit tests for settings and logging setup
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Unit tests for Settings, Hasher.from_settings and logging."""

import json
import logging

import pytest
import structlog
from pydantic import ValidationError

from argon2_kdf.core.algorithm import Algorithm
from argon2_kdf.core.hasher import Hasher
from argon2_kdf.errors import ConfigurationError
from argon2_kdf.logging_config import REDACTED, get_logger, redact_sensitive, setup_logging
from argon2_kdf.security.password_hash import verify_password
from argon2_kdf.settings import Settings, get_settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        """Test default settings."""
        settings = Settings(_env_file=None)
        assert settings.algorithm == Algorithm.ARGON2ID
        assert settings.memory_cost == 19456
        assert settings.time_cost == 2
        assert settings.parallelism == 1
        assert settings.hash_length == 32
        assert settings.salt_length == 16
        assert settings.log_format == "json"

    def test_env_overrides(self, monkeypatch):
        """Test environment overrides."""
        monkeypatch.setenv("ARGON2_KDF_ALGORITHM", "ARGON2I")
        monkeypatch.setenv("ARGON2_KDF_MEMORY_COST", "65536")
        monkeypatch.setenv("ARGON2_KDF_PARALLELISM", "4")
        settings = Settings(_env_file=None)
        assert settings.algorithm == Algorithm.ARGON2I
        assert settings.memory_cost == 65536
        assert settings.parallelism == 4

    def test_bad_log_format(self):
        """Test rejecting an unknown log format."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_get_settings_cached(self):
        """Test that settings are cached."""
        assert get_settings() is get_settings()


class TestHasherFromSettings:
    """Tests for building a Hasher from settings."""

    def test_from_settings(self):
        """Test building a hasher from settings."""
        settings = Settings(_env_file=None, memory_cost=4096, time_cost=3, hash_length=24)
        hasher = Hasher.from_settings(settings)
        assert hasher.memory_cost == 4096
        assert hasher.time_cost == 3
        assert hasher.hash_length == 24

    def test_from_settings_validates(self):
        """Test that invalid settings are rejected."""
        settings = Settings(_env_file=None, parallelism=0)
        with pytest.raises(ConfigurationError):
            Hasher.from_settings(settings)


@pytest.fixture
def restore_logging():
    """Put the package logger back in its unconfigured state."""
    yield
    logger = logging.getLogger("argon2_kdf")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = [logging.NullHandler()]
    logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()


class TestLogging:
    """Tests for structlog configuration."""

    def test_redacts_sensitive_keys(self):
        """Test redacting sensitive keys."""
        event = {"event": "hash_created", "password": "hunter2", "secret": b"pepper", "memory_cost": 64}
        out = redact_sensitive(None, "info", event)
        assert out["password"] == REDACTED
        assert out["secret"] == REDACTED
        assert out["memory_cost"] == 64

    def test_setup_logging_console(self, tmp_path, restore_logging):
        """Test console and file handler setup."""
        log_file = tmp_path / "argon2_kdf.log"
        settings = Settings(_env_file=None, log_format="console", log_level="DEBUG", log_file=str(log_file))
        setup_logging(settings)
        logger = logging.getLogger("argon2_kdf")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

    def test_silent_without_setup(self, capsys, fast_hasher):
        """Test that nothing is printed before setup_logging runs."""
        fast_hasher.hash(b"password")
        assert verify_password("password", "garbage") is False
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_redaction_without_setup(self, caplog):
        """Test that redaction applies to unconfigured loggers."""
        with caplog.at_level(logging.WARNING, logger="argon2_kdf"):
            get_logger("argon2_kdf.tests").warning("unit_event", password="hunter2", memory_cost=64)
        event = caplog.records[-1].msg
        assert event["event"] == "unit_event"
        assert event["password"] == REDACTED
        assert event["memory_cost"] == 64

    def test_setup_logging_renders_json(self, capsys, restore_logging):
        """Test JSON output once logging is configured."""
        setup_logging(Settings(_env_file=None, log_format="json", log_level="DEBUG"))
        get_logger("argon2_kdf.tests").info("unit_event", secret="pepper", memory_cost=64)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "unit_event"
        assert event["secret"] == REDACTED
        assert event["memory_cost"] == 64
        assert event["level"] == "info"
