# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for scorerun.

This module handles the one-time setup that happens before any real work begins.
The bootstrap sequence is:
  1. Validate the environment (Python version)
  2. Apply the configured log level and log file
  3. Log startup information

Every command that runs the pipeline goes through this first.
"""

from pathlib import Path

from scorerun.config.schema import GlobalConfig
from scorerun.logging.logger import configure_logging, get_logger
from scorerun.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: GlobalConfig, log_level_override: str | None = None) -> None:
    """
    Run the full bootstrap sequence.

    Args:
        config: The validated global configuration.
        log_level_override: Level given on the command line, if any. Wins over
            the config file.
    """
    check_minimum_python()

    log_level = log_level_override or config.log_level
    log_file = Path(config.log_file) if config.log_file is not None else None

    logger = get_logger("scorerun.runtime", log_level=log_level, log_file=log_file)
    configure_logging(log_level, log_file)

    system_info = get_system_info()
    logger.info(
        "scorerun bootstrap complete",
        extra={
            "config_version": config.config_version,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "cpu_count": system_info.cpu_count,
        },
    )
