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
Logging Configuration
=====================
Sets up the package logger for scripts and notebooks.

Library modules only create loggers with logging.getLogger(__name__);
nothing is configured on import. Call setup_logging() once from an
application entry point to see catalog and noise-lifting records.
"""

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "ddreach"


def setup_logging(
    level: Union[int, str] = logging.INFO, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the logger of the 'ddreach' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO or "DEBUG")
        log_file: Optional path to save logs to a file

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Avoid duplicate output when called repeatedly
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger


__all__ = ["PACKAGE_LOGGER", "setup_logging"]
