"""
Temperature collection service.

Walks the configured bathing sites one at a time, fetches their records and
gathers the reconciled observations into one flat list.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from ..core import constants
from ..core.date_utils import DateUtils
from ..core.logger import site_logger
from ..core.errors import DecodeError, FetchError
from ..models import TemperatureObservation

if TYPE_CHECKING:
    from ..api import HavochvattenAPI
    from ..processing import TemperatureReconciler


Locations = Union[Mapping[str, Optional[str]], Iterable[Tuple[str, Optional[str]]]]


@dataclass
class LocationError:
    """Failure to process one bathing site."""

    nuts_code: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.nuts_code}: {self.error}"


@dataclass
class CollectionResult:
    """Outcome of one collection run."""

    observations: List[TemperatureObservation] = field(default_factory=list)
    errors: List[LocationError] = field(default_factory=list)
    processed: List[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def has_data(self) -> bool:
        """False only when no bathing site could be processed."""
        return len(self.processed) > 0


class TemperatureCollector:
    """Collect temperature observations for a set of bathing sites."""

    def __init__(
        self,
        api_client: "HavochvattenAPI",
        reconciler: "TemperatureReconciler",
        location_interval: float = constants.DEFAULT_LOCATION_INTERVAL,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize collector.

        Args:
            api_client: Havochvatten API client
            reconciler: Reconciler turning records into observations
            location_interval: Minimum seconds between two location fetches
            logger: Logger instance
        """
        self.api_client = api_client
        self.reconciler = reconciler
        self.location_interval = location_interval
        self.logger = logger or logging.getLogger(__name__)
        self.date_utils = DateUtils(logger)

    @staticmethod
    def resolve_locations(locations: Locations) -> Dict[str, str]:
        """
        Collapse location entries into a mapping of code to internal id.

        Codes are upper-cased, later duplicates win and a missing internal
        id defaults to the code itself.

        Args:
            locations: Mapping or sequence of (code, internal id) pairs

        Returns:
            Ordered mapping of location code to internal id
        """
        items = locations.items() if isinstance(locations, Mapping) else locations

        resolved: Dict[str, str] = {}
        for nuts_code, internal_id in items:
            code = nuts_code.strip().upper()
            if not code:
                continue
            resolved[code] = (internal_id or "").strip() or code

        return resolved

    def collect(
        self,
        locations: Locations,
        cancel_event: Optional[threading.Event] = None,
        now: Optional[datetime] = None
    ) -> CollectionResult:
        """
        Collect observations for all locations, sequentially.

        A failing location is logged and skipped; it never aborts the run.

        Args:
            locations: Mapping or sequence of (code, internal id) pairs
            cancel_event: Once set, no further location is started
            now: Reference time (defaults to the current time)

        Returns:
            Collection result with observations and per-location errors
        """
        resolved = self.resolve_locations(locations)
        result = CollectionResult()

        # Future-value bound and forecast date are fixed for the whole run
        now = DateUtils.to_utc(now) if now is not None else DateUtils.now_utc()
        cutoff = self.reconciler.cutoff_for(now)
        today = self.date_utils.local_date(now, self.reconciler.timezone)

        self.logger.info(f"Loading temperature data for {len(resolved)} locations")

        last_start: Optional[float] = None
        for count, (nuts_code, internal_id) in enumerate(resolved.items(), start=1):
            if last_start is not None:
                self._throttle(last_start, cancel_event)

            if cancel_event is not None and cancel_event.is_set():
                self.logger.warning(
                    f"Collection cancelled, {len(resolved) - count + 1} locations not processed"
                )
                result.cancelled = True
                break

            last_start = time.monotonic()

            try:
                observations = self.collect_location(nuts_code, internal_id, cutoff, today)
            except (FetchError, DecodeError) as e:
                self.logger.error(f"Failed to load temperatures for {nuts_code}: {e}")
                result.errors.append(LocationError(nuts_code, e))
                continue

            result.observations.extend(observations)
            result.processed.append(nuts_code)
            self.logger.debug(f"{nuts_code} ({count}/{len(resolved)}): {len(observations)} observations")

        self.logger.info(
            f"Loaded {len(result.observations)} observations from "
            f"{len(result.processed)}/{len(resolved)} locations"
        )

        return result

    def collect_location(
        self,
        nuts_code: str,
        internal_id: str,
        cutoff: datetime,
        today: date
    ) -> List[TemperatureObservation]:
        """
        Fetch and reconcile the records of one location.

        Raises:
            FetchError: If either record could not be fetched
            DecodeError: If either record was malformed
        """
        log = site_logger(self.logger, nuts_code)

        profile = self.api_client.fetch_profile(nuts_code)
        if profile is None:
            log.info("No bathing water profile found")
            return []

        detail = self.api_client.fetch_detail(nuts_code)
        if detail is None:
            log.info("No detail found, using forecasts only")
        else:
            log.info(f"Loading temperatures for {detail.name or profile.name}")

        return self.reconciler.reconcile(nuts_code, internal_id, detail, profile, cutoff, today)

    def _throttle(self, last_start: float, cancel_event: Optional[threading.Event]) -> None:
        remaining = self.location_interval - (time.monotonic() - last_start)
        if remaining <= 0:
            return

        self.logger.debug(f"Sleeping {remaining:.2f}s to prevent rate limiting")
        if cancel_event is not None:
            cancel_event.wait(remaining)
        else:
            time.sleep(remaining)
