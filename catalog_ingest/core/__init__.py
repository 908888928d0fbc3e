"""Core infrastructure modules."""

from .exceptions import (
    CatalogIngestException,
    ChannelNotFoundError,
    ConfigurationError,
    QuotaExceededError,
    StoreConnectionError,
)
from .logging import setup_logging, get_logger

__all__ = [
    "CatalogIngestException",
    "ChannelNotFoundError",
    "ConfigurationError",
    "QuotaExceededError",
    "StoreConnectionError",
    "setup_logging",
    "get_logger",
]
