# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Unit Tests for Catalog Configuration
====================================

Tests environment-driven settings and the process-wide random source.
"""

import logging

import numpy as np
import pytest

from ddreach import config
from ddreach.config import (
    DEFAULT_MODE,
    LOG_LEVEL_ENV_VAR,
    SEED_ENV_VAR,
    UNCERTAINTY_MODES,
    configure_from_environment,
    get_config,
    get_random_source,
    reset_random_source,
)
from ddreach.logging_config import PACKAGE_LOGGER

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clean_environment(monkeypatch):
    """Unset the catalog variables and forget any random source"""
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.setattr(config, "_random_source", None)


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


# ============================================================================
# Settings
# ============================================================================


class TestConstants:
    """Test module-level defaults"""

    def test_default_mode_is_standard(self):
        assert DEFAULT_MODE == "standard"
        assert UNCERTAINTY_MODES == ("standard", "diag", "rand")


class TestGetConfig:
    """Test reading settings from the environment"""

    def test_defaults(self, clean_environment):
        settings = get_config()

        assert settings["mode"] == "standard"
        assert settings["seed"] is None
        assert settings["log_level"] == "WARNING"

    def test_seed_from_environment(self, clean_environment, monkeypatch):
        monkeypatch.setenv(SEED_ENV_VAR, " 42 ")

        assert get_config()["seed"] == 42

    def test_empty_seed_is_unseeded(self, clean_environment, monkeypatch):
        monkeypatch.setenv(SEED_ENV_VAR, "")

        assert get_config()["seed"] is None

    def test_invalid_seed_raises(self, clean_environment, monkeypatch):
        monkeypatch.setenv(SEED_ENV_VAR, "forty-two")

        with pytest.raises(ValueError, match=SEED_ENV_VAR):
            get_config()

    def test_log_level_is_upper_cased(self, clean_environment, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "debug")

        assert get_config()["log_level"] == "DEBUG"


class TestConfigureFromEnvironment:
    """Test applying the environment settings"""

    def test_applies_level_and_seed(self, clean_environment, monkeypatch, restore_package_logger):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "error")
        monkeypatch.setenv(SEED_ENV_VAR, "8")

        settings = configure_from_environment()

        assert settings["seed"] == 8
        assert restore_package_logger.level == logging.ERROR
        assert get_random_source().random() == np.random.default_rng(8).random()


# ============================================================================
# Random Source
# ============================================================================


class TestRandomSource:
    """Test the lazily created process-wide generator"""

    def test_created_once(self, clean_environment):
        assert get_random_source() is get_random_source()

    def test_seed_argument(self, clean_environment):
        rng = get_random_source(seed=3)

        assert rng.random() == np.random.default_rng(3).random()

    def test_seed_ignored_once_created(self, clean_environment):
        """Test a later seed does not replace the existing generator"""
        first = get_random_source(seed=3)

        assert get_random_source(seed=4) is first

    def test_seed_from_environment(self, clean_environment, monkeypatch):
        monkeypatch.setenv(SEED_ENV_VAR, "21")

        assert get_random_source().standard_normal() == np.random.default_rng(21).standard_normal()

    def test_reset_replaces_generator(self, clean_environment):
        first = get_random_source()

        second = reset_random_source(5)

        assert second is not first
        assert get_random_source() is second
        assert second.random() == np.random.default_rng(5).random()
