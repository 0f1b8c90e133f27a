"""
Business logic services for the bathing temperature integration.

Services orchestrate API operations and provide higher-level functionality.
"""

from .collector import TemperatureCollector, CollectionResult, LocationError
from .publisher import Publisher, PublishSummary, PublishFailure
from .fiware_publisher import EntityStorePublisher
from .lwm2m_publisher import TelemetryPublisher

__all__ = [
    "TemperatureCollector",
    "CollectionResult",
    "LocationError",
    "Publisher",
    "PublishSummary",
    "PublishFailure",
    "EntityStorePublisher",
    "TelemetryPublisher",
]
