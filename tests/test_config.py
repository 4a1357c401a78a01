"""Tests for configuration models and logging setup."""

import io
import logging

import pytest
from pydantic import ValidationError

from pageclip.logging_config import setup_logging
from pageclip.models.config import (
    DEFAULT_REMOVE_SELECTORS,
    BridgeConfig,
    ClipConfig,
    ExtractionConfig,
    ImageConfig,
)


class TestClipConfig:
    """Tests for ClipConfig."""

    def test_defaults(self):
        """Test default values match the documented pipeline settings."""
        config = ClipConfig()

        assert config.extraction.content_selectors[0] == "article"
        assert config.extraction.min_selector_text == 200
        assert config.extraction.density_min_text == 500
        assert config.images.max_images == 20
        assert config.images.min_width == 100
        assert config.render.max_length == 50_000
        assert config.bridge.timeout == 10.0
        assert config.log_level == "INFO"

    def test_yaml_round_trip(self):
        """Test config survives YAML serialization."""
        config = ClipConfig(images=ImageConfig(max_images=5), log_level="DEBUG")

        loaded = ClipConfig.from_yaml(config.to_yaml())

        assert loaded == config

    def test_partial_yaml(self):
        """Test omitted sections keep their defaults."""
        config = ClipConfig.from_yaml("images:\n  max_images: 3\n")

        assert config.images.max_images == 3
        assert config.render.max_length == 50_000

    def test_empty_yaml(self):
        assert ClipConfig.from_yaml("") == ClipConfig()

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "pageclip.yaml"
        path.write_text("render:\n  max_length: 100\n")

        assert ClipConfig.from_yaml_file(path).render.max_length == 100

    def test_unknown_keys_rejected(self):
        """Test typos in config keys are reported."""
        with pytest.raises(ValidationError):
            ClipConfig.from_yaml("imagez:\n  max_images: 3\n")

    def test_malformed_yaml_rejected(self):
        """Test YAML syntax errors surface as ValueError."""
        with pytest.raises(ValueError, match="Invalid YAML config"):
            ClipConfig.from_yaml("images: [max_images: 3\n")

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            BridgeConfig(timeout=0)
        with pytest.raises(ValidationError):
            ClipConfig(log_level="LOUD")

    def test_extra_remove_selectors(self):
        """Test extra selectors are appended once to the defaults."""
        config = ExtractionConfig(remove_selectors=[".promo", "nav"])

        assert config.all_remove_selectors == DEFAULT_REMOVE_SELECTORS + [".promo"]


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_configures_package_logger(self):
        """Test the pageclip logger writes to the given stream."""
        stream = io.StringIO()

        logger = setup_logging(level="DEBUG", stream=stream, force=True)
        logging.getLogger("pageclip.extraction.locator").debug("located")

        assert logger.name == "pageclip"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert "located" in stream.getvalue()

    def test_log_file(self, tmp_path):
        """Test a file handler is added when requested."""
        log_file = tmp_path / "pageclip.log"

        logger = setup_logging(level="INFO", log_file=log_file, stream=io.StringIO(), force=True)
        logger.info("saved")
        for handler in logger.handlers:
            handler.flush()

        assert "saved" in log_file.read_text()

        # Detach the file handler so later tests do not write to tmp_path
        setup_logging(stream=io.StringIO(), force=True)
