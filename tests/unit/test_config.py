"""Unit tests for configuration and logging setup."""

import io

import pytest
from loguru import logger
from pydantic import ValidationError

from netstr.common.config import DEFAULT_MAX_FRAME_SIZE, CodecConfig, LogConfig, NetstrConfig
from netstr.common.log_base import setup_logging
from netstr.protocol import EndOfStream, NetstrDecoder


class TestNetstrConfig:
    """Test configuration models."""

    def test_defaults(self):
        """Test default settings."""
        config = NetstrConfig()

        assert config.codec.read_size == 4096
        assert config.codec.max_frame_size == DEFAULT_MAX_FRAME_SIZE
        assert config.codec.pool_max_free == 64
        assert config.logging.level == "WARNING"

    def test_from_dict(self):
        """Test loading nested settings from a dictionary."""
        config = NetstrConfig.from_dict(
            {"codec": {"read_size": 512, "max_frame_size": 1024}, "logging": {"level": "debug"}}
        )

        assert config.codec.read_size == 512
        assert config.codec.max_frame_size == 1024
        assert config.logging.level == "DEBUG"

    def test_invalid_values(self):
        """Test validators reject bad settings."""
        with pytest.raises(ValidationError):
            CodecConfig(read_size=0)
        with pytest.raises(ValidationError):
            CodecConfig(max_frame_size=-1)
        with pytest.raises(ValidationError):
            CodecConfig(pool_max_free=-1)
        with pytest.raises(ValidationError):
            LogConfig(level="LOUD")
        with pytest.raises(ValidationError):
            LogConfig(environment="staging")

    def test_toml_file(self, tmp_path):
        """Test reading a TOML configuration file."""
        config_file = tmp_path / "netstr.toml"
        config_file.write_text(
            "[codec]\nread_size = 128\nmax_frame_size = 65536\n\n[logging]\nlevel = \"INFO\"\n",
            encoding="utf-8",
        )

        config = NetstrConfig.from_file(config_file)

        assert config.codec.read_size == 128
        assert config.codec.max_frame_size == 65536
        assert config.logging.level == "INFO"

    def test_save_and_load(self, tmp_path):
        """Test saved configuration loads back unchanged."""
        config_file = tmp_path / "netstr.toml"
        original = NetstrConfig.from_dict({"codec": {"read_size": 256}})

        original.save_to_file(config_file)
        restored = NetstrConfig.from_file(config_file)

        assert restored == original


class TestLogging:
    """Test logging setup."""

    def test_invalid_level(self):
        """Test unknown levels are rejected."""
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")

    def test_log_file(self, tmp_path):
        """Test a log file is created in the log directory."""
        setup_logging(level="DEBUG", log_dir=tmp_path, environment="production")
        logger.info("written to file")
        logger.remove()

        # the file may already be compressed once its sink is removed
        assert len(list(tmp_path.glob("netstr_*.log*"))) == 1

    def test_library_logs_state_changes(self):
        """Test the decoder reports end of stream at debug level."""
        setup_logging(level="DEBUG")
        messages = []
        logger.add(messages.append, level="DEBUG", format="{message}")

        decoder = NetstrDecoder(io.BytesIO(b""))
        with pytest.raises(EndOfStream):
            decoder.decode()

        assert any("end of stream" in message for message in messages)

    def test_library_silent_by_default(self):
        """Test the library does not log until enabled."""
        messages = []
        logger.add(messages.append, level="DEBUG", format="{message}")

        with pytest.raises(EndOfStream):
            NetstrDecoder(io.BytesIO(b"")).decode()

        assert messages == []
