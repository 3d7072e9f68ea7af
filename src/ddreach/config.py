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
Configuration & Random Source
=============================
Central place for catalog defaults and the process-wide random source.

Environment Variables:
    DDREACH_SEED: Integer seed for the default random source. Unset means
        an unseeded generator.
    DDREACH_LOG_LEVEL: Level name used by setup_logging() when called
        through configure_from_environment().

Exports:
    DEFAULT_MODE, UNCERTAINTY_MODES, DEFAULT_SCALABLE_DIM
    CatalogConfig, get_config()
    get_random_source(), reset_random_source()
"""

import logging
import os
from typing import Optional, Tuple

import numpy as np
from typing_extensions import TypedDict

from ddreach.logging_config import setup_logging
from ddreach.types.core import UncertaintyMode

logger = logging.getLogger(__name__)

# Global Constants
DEFAULT_MODE: UncertaintyMode = "standard"
UNCERTAINTY_MODES: Tuple[str, ...] = ("standard", "diag", "rand")
DEFAULT_SCALABLE_DIM: int = 4

SEED_ENV_VAR = "DDREACH_SEED"
LOG_LEVEL_ENV_VAR = "DDREACH_LOG_LEVEL"


class CatalogConfig(TypedDict):
    """
    Process-level catalog settings.

    Attributes
    ----------
    mode : str
        Default uncertainty mode
    seed : Optional[int]
        Seed of the default random source, None for unseeded
    log_level : str
        Level name for setup_logging()
    """

    mode: str
    seed: Optional[int]
    log_level: str


def get_config() -> CatalogConfig:
    """
    Read the catalog settings from the environment.

    Raises:
        ValueError: If DDREACH_SEED is set but is not an integer
    """
    raw_seed = os.environ.get(SEED_ENV_VAR, "").strip()
    seed: Optional[int] = None
    if raw_seed:
        try:
            seed = int(raw_seed)
        except ValueError:
            raise ValueError(f"{SEED_ENV_VAR} must be an integer, got {raw_seed!r}") from None

    log_level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").strip().upper() or "WARNING"
    return CatalogConfig(mode=DEFAULT_MODE, seed=seed, log_level=log_level)


def configure_from_environment() -> CatalogConfig:
    """Apply DDREACH_LOG_LEVEL and DDREACH_SEED; returns the settings used."""
    config = get_config()
    setup_logging(config["log_level"])
    reset_random_source(config["seed"])
    return config


_random_source: Optional[np.random.Generator] = None


def get_random_source(seed: Optional[int] = None) -> np.random.Generator:
    """
    Return the process-wide random source.

    The generator is created lazily, from seed if given, otherwise from
    DDREACH_SEED. Once created, later calls return the same generator and
    ignore seed; use reset_random_source() to replace it.
    """
    global _random_source
    if _random_source is None:
        if seed is None:
            seed = get_config()["seed"]
        _random_source = np.random.default_rng(seed)
        logger.debug("Created default random source (seed=%s)", seed)
    return _random_source


def reset_random_source(seed: Optional[int] = None) -> np.random.Generator:
    """Replace the process-wide random source with a fresh generator."""
    global _random_source
    _random_source = np.random.default_rng(seed)
    logger.debug("Reset default random source (seed=%s)", seed)
    return _random_source


__all__ = [
    "DEFAULT_MODE",
    "UNCERTAINTY_MODES",
    "DEFAULT_SCALABLE_DIM",
    "CatalogConfig",
    "get_config",
    "configure_from_environment",
    "get_random_source",
    "reset_random_source",
]
