"""
Seeder Exceptions

Custom exceptions raised across the ingestion pipeline.
"""


class CatalogIngestException(Exception):
    """Base exception for catalog ingestion errors."""

    def __init__(self, message: str, exit_code: int = 1):
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class StoreConnectionError(CatalogIngestException):
    """Catalog store could not be reached."""

    def __init__(self, reason: str):
        super().__init__(message=f"Catalog store unavailable: {reason}")


class ConfigurationError(CatalogIngestException):
    """Required setting missing or invalid."""

    def __init__(self, setting: str):
        super().__init__(message=f"Missing or invalid setting: {setting}", exit_code=2)


class ChannelNotFoundError(CatalogIngestException):
    """Channel query did not resolve to a channel."""

    def __init__(self, query: str):
        super().__init__(message=f"Channel not found: {query}")


class QuotaExceededError(CatalogIngestException):
    """API quota exceeded."""

    def __init__(self, api_name: str):
        super().__init__(
            message=f"{api_name} API quota exceeded. Try again tomorrow."
        )
