"""
Core utilities for the bathing temperature integration.

Provides configuration management, logging and date handling.
"""

from .config import Config
from .logger import setup_logger, site_logger, SiteLogger, LoggerContext
from . import constants
from .date_utils import DateUtils

__all__ = [
    "Config",
    "setup_logger",
    "LoggerContext",
    "SiteLogger",
    "site_logger",
    "constants",
    "DateUtils",
]
