"""
=========================================
Core infrastructure for the SQL builders.
=========================================

This package provides centralized configuration management and logging
infrastructure shared by the sql, migration and utils packages.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger, setup_logging
    >>>
    >>> setup_logging()
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Connecting to {config.db_host}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'config', 'Config']

from core.config import Config, config
from core.logger import get_logger, setup_logging
