"""
API layer for the bathing temperature integration.

Provides the Havochvatten reader and the context broker and LwM2M clients.
"""

from .client import APIClient
from ..core.errors import (
    BathingTemperatureError,
    FetchError,
    DecodeError,
    ParseError,
    DownstreamError,
    EntityNotFoundError,
    EntityAlreadyExistsError,
)
from .havochvatten import HavochvattenAPI
from .context_broker import ContextBrokerAPI
from .lwm2m import LwM2MAPI


__all__ = [
    "APIClient",
    "HavochvattenAPI",
    "ContextBrokerAPI",
    "LwM2MAPI",
    "BathingTemperatureError",
    "FetchError",
    "DecodeError",
    "ParseError",
    "DownstreamError",
    "EntityNotFoundError",
    "EntityAlreadyExistsError",
]
