"""
Data models for the bathing temperature integration.

Contains DTOs for upstream records, observations and downstream payloads.
"""

from .bathing_water import Detail, BathingProfile, ForecastEntry, parse_temperature
from .temperature import TemperatureObservation
from .properties import (
    ContextProperty,
    LocationProperty,
    DateTimeProperty,
    NumberProperty,
    TextProperty,
    build_fragment,
    build_entity,
)
from .senml import SenMLRecord, base_record, value_record, build_pack, temperature_pack, normalize_pack

__all__ = [
    "Detail",
    "BathingProfile",
    "ForecastEntry",
    "parse_temperature",
    "TemperatureObservation",
    "ContextProperty",
    "LocationProperty",
    "DateTimeProperty",
    "NumberProperty",
    "TextProperty",
    "build_fragment",
    "build_entity",
    "SenMLRecord",
    "base_record",
    "value_record",
    "build_pack",
    "temperature_pack",
    "normalize_pack",
]
