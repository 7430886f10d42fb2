"""
Utilities shared by the service layer.
"""

from entity_service.shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    InternalError,
    ConfigurationError,
)

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "InternalError",
    "ConfigurationError",
]
