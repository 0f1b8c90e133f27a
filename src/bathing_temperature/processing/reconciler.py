"""
Temperature reconciliation.

Combines the sampled temperature and the hourly forecast values of one
bathing site into a list of temperature observations.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from ..core import constants
from ..core.errors import ParseError
from ..models import BathingProfile, Detail, TemperatureObservation


class TemperatureReconciler:
    """Derive temperature observations from upstream records."""

    def __init__(
        self,
        sample_source: str,
        timezone: str = constants.DEFAULT_TIMEZONE,
        future_tolerance: timedelta = constants.FUTURE_TOLERANCE,
        forecast_source: str = constants.FORECAST_SOURCE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reconciler.

        Args:
            sample_source: Source label for sampled temperatures (upstream URL)
            timezone: Timezone forecast hours are expressed in
            future_tolerance: How far ahead of now a forecast may be dated
            forecast_source: Source label for forecast temperatures
            logger: Logger instance
        """
        self.sample_source = sample_source
        self.timezone = timezone
        self.future_tolerance = future_tolerance
        self.forecast_source = forecast_source
        self.logger = logger or logging.getLogger(__name__)

    def cutoff_for(self, now: datetime) -> datetime:
        """Forecasts dated at or after the returned time are excluded."""
        return now + self.future_tolerance

    def reconcile(
        self,
        nuts_code: str,
        internal_id: str,
        detail: Optional[Detail],
        profile: Optional[BathingProfile],
        cutoff: datetime,
        today: date
    ) -> List[TemperatureObservation]:
        """
        Build observations for one bathing site.

        The sampled temperature (if any) comes first, followed by forecast
        values in their original order. Unparsable values and forecasts dated
        at or after the cutoff are skipped.

        Args:
            nuts_code: Location code
            internal_id: Identifier used for downstream identities
            detail: Current details, if available
            profile: Bathing water profile, if available
            cutoff: Exclusive upper bound for forecast timestamps (UTC)
            today: Local calendar date forecast hours refer to

        Returns:
            List of observations (empty without a profile)
        """
        if profile is None:
            self.logger.debug(f"{nuts_code} has no bathing water profile")
            return []

        observations: List[TemperatureObservation] = []

        if detail is not None and detail.has_sample:
            try:
                observations.append(self._observation(
                    nuts_code, internal_id, profile,
                    detail.observed_at(), detail.temperature(), self.sample_source
                ))
            except ParseError as e:
                self.logger.debug(f"Skipping sampled temperature for {nuts_code}: {e}")
        else:
            self.logger.debug(f"Temperature has not been sampled for {nuts_code}")

        forecasts = 0
        for entry in profile.forecasts:
            if not entry.has_value:
                continue

            try:
                observed_at = entry.observed_at(today, self.timezone)
                if observed_at >= cutoff:
                    continue
                temperature = entry.temperature()
            except ParseError as e:
                self.logger.debug(f"Skipping forecast for {nuts_code}: {e}")
                continue

            observations.append(self._observation(
                nuts_code, internal_id, profile,
                observed_at, temperature, self.forecast_source
            ))
            forecasts += 1

        self.logger.debug(
            f"Temperature [sample: {len(observations) > forecasts}, forecasts: {forecasts}] "
            f"for {profile.name or nuts_code} loaded"
        )

        return observations

    @staticmethod
    def _observation(
        nuts_code: str,
        internal_id: str,
        profile: BathingProfile,
        observed_at: datetime,
        temperature: float,
        source: str
    ) -> TemperatureObservation:
        return TemperatureObservation(
            nuts_code=nuts_code,
            internal_id=internal_id,
            latitude=profile.latitude,
            longitude=profile.longitude,
            observed_at=observed_at,
            temperature=temperature,
            source=source,
        )
