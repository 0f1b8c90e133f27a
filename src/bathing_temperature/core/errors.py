"""
Error taxonomy for upstream fetches and downstream publishing.
"""

from typing import Optional


class BathingTemperatureError(Exception):
    """Base class for all integration errors."""


class FetchError(BathingTemperatureError):
    """Upstream request failed or returned an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DecodeError(BathingTemperatureError):
    """Upstream response body was not valid JSON for the expected record."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ParseError(BathingTemperatureError):
    """A numeric or hour field inside an upstream record could not be parsed."""


class DownstreamError(BathingTemperatureError):
    """Publishing to the context broker or LwM2M endpoint failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class EntityNotFoundError(DownstreamError):
    """Merge target does not exist in the context broker."""


class EntityAlreadyExistsError(DownstreamError):
    """Entity to create already exists in the context broker."""
