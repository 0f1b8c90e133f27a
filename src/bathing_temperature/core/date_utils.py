"""
Date and timezone utilities.

Centralizes all date/time operations with proper timezone handling.
"""

import logging
from datetime import date, datetime, time
from typing import Optional
import pytz
from pytz.tzinfo import BaseTzInfo


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'Europe/Stockholm', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    @staticmethod
    def now_utc() -> datetime:
        """Current time as an aware UTC datetime."""
        return datetime.now(pytz.UTC)

    def local_date(self, reference_time: datetime, timezone_str: str) -> date:
        """
        Get the calendar date of a point in time in the specified timezone.

        Args:
            reference_time: Reference time (naive values are taken as UTC)
            timezone_str: Timezone string

        Returns:
            Local calendar date
        """
        local_time = self.to_utc(reference_time).astimezone(self.parse_timezone(timezone_str))
        self.logger.debug(
            f"Reference time: {reference_time.isoformat()} -> "
            f"Local time: {local_time.isoformat()}"
        )
        return local_time.date()

    @classmethod
    def hour_of_day(cls, day: date, hour: int, timezone_str: str) -> datetime:
        """
        Combine a local calendar date with a full hour and normalize to UTC.

        Args:
            day: Calendar date in the given timezone
            hour: Hour of day (0-23)
            timezone_str: Timezone the hour is expressed in

        Returns:
            Timezone-aware UTC datetime

        Raises:
            ValueError: If hour is outside 0-23 or timezone is invalid
        """
        tz = cls.parse_timezone(timezone_str)
        local = tz.localize(datetime.combine(day, time(hour=hour)))
        return local.astimezone(pytz.UTC)

    @staticmethod
    def from_epoch_millis(millis: int) -> datetime:
        """
        Convert epoch milliseconds to a UTC datetime truncated to whole seconds.

        Args:
            millis: Milliseconds since the Unix epoch

        Returns:
            Timezone-aware UTC datetime
        """
        return datetime.fromtimestamp(millis // 1000, tz=pytz.UTC)

    @staticmethod
    def to_utc(dt: datetime) -> datetime:
        """
        Convert datetime to UTC.

        Args:
            dt: Datetime object (can be naive or aware)

        Returns:
            Datetime in UTC (timezone-aware)
        """
        if dt.tzinfo is None:
            # Assume UTC if no timezone
            return pytz.UTC.localize(dt)
        return dt.astimezone(pytz.UTC)

    @classmethod
    def to_rfc3339_nano(cls, dt: datetime) -> str:
        """
        Format a datetime as RFC 3339 in UTC with trimmed fractional seconds.

        Trailing zeros of the fraction are dropped, and the fraction is
        omitted altogether for whole seconds.

        Example:
            2023-11-14T22:13:20Z, 2023-11-14T22:13:20.5Z
        """
        utc = cls.to_utc(dt)
        text = utc.strftime("%Y-%m-%dT%H:%M:%S")
        if utc.microsecond:
            text += "." + f"{utc.microsecond:06d}".rstrip("0")
        return text + "Z"

    @classmethod
    def to_compact_utc(cls, dt: datetime) -> str:
        """Format a datetime as RFC 3339 without hyphens and colons (20231114T221320Z)."""
        return cls.to_utc(dt).strftime("%Y%m%dT%H%M%SZ")

    @classmethod
    def to_unix_seconds(cls, dt: datetime) -> int:
        """Whole seconds since the Unix epoch."""
        return int(cls.to_utc(dt).timestamp())
