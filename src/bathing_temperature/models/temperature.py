"""
Temperature observation model.

The unified record produced by reconciliation and consumed by publishers.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TemperatureObservation:
    """A water temperature reading at a bathing site."""

    nuts_code: str
    internal_id: str
    latitude: float
    longitude: float
    observed_at: datetime  # UTC, timezone-aware
    temperature: float  # °C
    source: str
