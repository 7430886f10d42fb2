"""
Configuration module: Settings and logging.
"""

from entity_service.shared.config.settings import settings, get_settings, DATABASE_URL
from entity_service.shared.config.logging import get_logger, setup_logging

__all__ = [
    # settings
    "settings",
    "get_settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
]
