"""
Tests for environment-driven settings.
"""

import pytest
from pathlib import Path

from papershelf.config import DEFAULT_FETCH_TIMEOUT, Settings
from papershelf.errors import ValidationError


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        """Test settings defaults."""
        settings = Settings.from_env({})

        assert settings.storage_dir == Path("storage")
        assert settings.fetch_timeout == DEFAULT_FETCH_TIMEOUT
        assert settings.debug is False

    def test_from_env(self):
        """Test settings read from environment variables."""
        settings = Settings.from_env({
            "PAPERSHELF_STORAGE_DIR": "/data/papers",
            "PAPERSHELF_FETCH_TIMEOUT": "15",
            "PAPERSHELF_DEBUG": "true",
        })

        assert settings.storage_dir == Path("/data/papers")
        assert settings.fetch_timeout == 15.0
        assert settings.debug is True

    @pytest.mark.parametrize("value", ["soon", "0", "-5"])
    def test_invalid_timeout(self, value):
        """Test rejection of invalid timeouts."""
        with pytest.raises(ValidationError):
            Settings.from_env({"PAPERSHELF_FETCH_TIMEOUT": value})
