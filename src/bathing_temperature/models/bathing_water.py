"""
Havochvatten bathing site data models.

Contains DTOs for the detail and bathing water profile resources.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..core.date_utils import DateUtils
from ..core.errors import ParseError


def parse_temperature(value: Optional[str]) -> float:
    """
    Parse a temperature reading from its string representation.

    Args:
        value: Numeric string in °C

    Returns:
        Temperature as float

    Raises:
        ParseError: If the value is missing, not numeric or not finite
    """
    if value is None:
        raise ParseError("temperature value is missing")

    try:
        temperature = float(value)
    except (TypeError, ValueError):
        raise ParseError(f"failed to convert temperature value {value!r}")

    if not math.isfinite(temperature):
        raise ParseError(f"temperature value {value!r} is not finite")

    return temperature


def _text(value: Any) -> str:
    """Feed values may arrive as strings or JSON numbers; null becomes empty."""
    return "" if value is None else str(value)


@dataclass
class Detail:
    """Current details of a bathing site, including the latest sample."""

    nuts_code: str
    name: Optional[str] = None
    area: Optional[str] = None
    description: Optional[str] = None
    # Epoch milliseconds as sent by the feed, parsed on use
    sample_date: Optional[Any] = None
    sample_temperature: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Detail":
        return cls(
            nuts_code=data.get("nutsCode", ""),
            name=data.get("locationName"),
            area=data.get("locationArea"),
            description=data.get("bathInformation"),
            sample_date=data.get("sampleDate"),
            sample_temperature=data.get("sampleTemperature"),
        )

    @property
    def has_sample(self) -> bool:
        """Whether the site has been sampled at all."""
        return self.sample_temperature is not None

    def observed_at(self) -> datetime:
        """
        Time the sample was taken, truncated to whole seconds.

        Raises:
            ParseError: If the site has no sample or the sample date is
                        missing or not an epoch millisecond count
        """
        if self.sample_temperature is None or self.sample_date is None:
            raise ParseError(f"{self.nuts_code} has not been sampled")

        if isinstance(self.sample_date, bool):
            raise ParseError(f"invalid sample date {self.sample_date!r}")

        try:
            return DateUtils.from_epoch_millis(int(self.sample_date))
        except (TypeError, ValueError, OverflowError, OSError):
            raise ParseError(f"invalid sample date {self.sample_date!r}")

    def temperature(self) -> float:
        """Sampled temperature in °C."""
        return parse_temperature(self.sample_temperature)


@dataclass
class ForecastEntry:
    """Hourly model values for the current day."""

    # Water temperature for the hour given in meas_hour
    copernicus_data: str = ""
    # Hour of day (24h) the forecast refers to
    meas_hour: str = ""
    smhi_temp: Optional[str] = None
    smhi_wind_speed: Optional[str] = None
    smhi_weather_symbol: Optional[str] = None
    smhi_precipitation_mean: Optional[str] = None
    smhi_wind_direction: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForecastEntry":
        return cls(
            copernicus_data=_text(data.get("copernicusData")),
            meas_hour=_text(data.get("measHour")),
            smhi_temp=data.get("smhiTemp"),
            smhi_wind_speed=data.get("smhiWs"),
            smhi_weather_symbol=data.get("smhiWsymb"),
            smhi_precipitation_mean=data.get("smhiPmean"),
            smhi_wind_direction=data.get("smhiWindDir"),
        )

    @property
    def has_value(self) -> bool:
        return self.copernicus_data != ""

    def hour(self) -> int:
        """
        Hour of day the entry refers to.

        Raises:
            ParseError: If the hour is not an integer between 0 and 23
        """
        try:
            hour = int(self.meas_hour)
        except (TypeError, ValueError):
            raise ParseError(f"invalid forecast hour {self.meas_hour!r}")

        if not 0 <= hour <= 23:
            raise ParseError(f"forecast hour {hour} out of range")

        return hour

    def observed_at(self, today: date, timezone_str: str) -> datetime:
        """
        Timestamp of the entry: today's date at the entry's hour, in UTC.

        Args:
            today: Current calendar date in the local timezone
            timezone_str: Timezone the forecast hours are expressed in
        """
        return DateUtils.hour_of_day(today, self.hour(), timezone_str)

    def temperature(self) -> float:
        """Forecast water temperature in °C."""
        return parse_temperature(self.copernicus_data)


@dataclass
class BathingProfile:
    """Bathing water profile with position and hourly forecasts."""

    nuts_code: str
    latitude: float
    longitude: float
    name: Optional[str] = None
    description: Optional[str] = None
    latest_update: Optional[int] = None
    forecasts: List[ForecastEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BathingProfile":
        return cls(
            nuts_code=data.get("nutsCode", ""),
            latitude=float(data.get("decLat") or 0.0),
            longitude=float(data.get("decLong") or 0.0),
            name=data.get("name"),
            description=data.get("description"),
            latest_update=data.get("profileLatestUpdate"),
            forecasts=[ForecastEntry.from_dict(c) for c in data.get("coperSmhi") or []],
        )
