"""
Shared publishing loop for downstream sinks.

Publishes observations one at a time and keeps track of failures.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..core.errors import DownstreamError
from ..core.logger import site_logger
from ..models import TemperatureObservation


@dataclass
class PublishFailure:
    """An observation that could not be published."""

    observation: TemperatureObservation
    error: DownstreamError

    def __str__(self) -> str:
        return f"{self.observation.nuts_code} @ {self.observation.observed_at.isoformat()}: {self.error}"


@dataclass
class PublishSummary:
    """Outcome of publishing a batch of observations."""

    published: int = 0
    failures: List[PublishFailure] = field(default_factory=list)
    # Observations left unpublished because the run was cancelled
    skipped: int = 0
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    @property
    def last_error(self) -> Optional[DownstreamError]:
        """Most recent failure, if any."""
        return self.failures[-1].error if self.failures else None


class Publisher(ABC):
    """Base class for publishers of temperature observations."""

    # Output type name used in log records
    sink = ""

    def __init__(self, stop_on_error: bool = False, logger: Optional[logging.Logger] = None):
        """
        Initialize publisher.

        Args:
            stop_on_error: Raise the first failure instead of continuing with
                           the remaining observations
            logger: Logger instance
        """
        self.stop_on_error = stop_on_error
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def publish_observation(self, observation: TemperatureObservation) -> None:
        """
        Publish a single observation.

        Raises:
            DownstreamError: If the observation could not be published
        """

    def publish(
        self,
        observations: Iterable[TemperatureObservation],
        cancel_event: Optional[threading.Event] = None
    ) -> PublishSummary:
        """
        Publish observations in order.

        Args:
            observations: Observations to publish
            cancel_event: Once set, no further observation is published

        Returns:
            Summary with the number published, the failures and whether
            the batch was cut short

        Raises:
            DownstreamError: On the first failure when stop_on_error is set
        """
        summary = PublishSummary()
        pending = list(observations)

        for index, observation in enumerate(pending):
            if cancel_event is not None and cancel_event.is_set():
                summary.cancelled = True
                summary.skipped = len(pending) - index
                self.logger.warning(f"Publishing cancelled, {summary.skipped} observations not sent")
                break

            try:
                self.publish_observation(observation)
            except DownstreamError as e:
                site_logger(self.logger, observation.nuts_code, self.sink).error(
                    f"Failed to publish temperature for {observation.internal_id}: {e}"
                )
                if self.stop_on_error:
                    raise
                summary.failures.append(PublishFailure(observation, e))
                continue

            summary.published += 1

        self.log_publish_summary(summary)
        return summary

    def log_publish_summary(self, summary: PublishSummary) -> None:
        total = summary.published + len(summary.failures) + summary.skipped
        self.logger.info(f"Publish complete: {summary.published}/{total} successful")

        if summary.failures:
            self.logger.warning("Failed observations:")
            for failure in summary.failures:
                self.logger.warning(f"  - {failure}")
