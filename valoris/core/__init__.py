"""Core infrastructure: settings, logging, exceptions, statistics."""

from .config import Settings, get_settings, settings
from .exceptions import (
    AppException,
    ConfigurationError,
    PriceValidationError,
    ValidationError,
)
from .logging import card_id_var, get_logger, setup_logging


__all__ = [
    "AppException",
    "ConfigurationError",
    "PriceValidationError",
    "Settings",
    "ValidationError",
    "card_id_var",
    "get_logger",
    "get_settings",
    "settings",
    "setup_logging",
]
