"""
LwM2M publisher.

Publishes observations as SenML encoded temperature objects.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .publisher import Publisher
from ..core import constants
from ..core.logger import site_logger
from ..models import TemperatureObservation, temperature_pack

if TYPE_CHECKING:
    from ..api import LwM2MAPI


class TelemetryPublisher(Publisher):
    """Post one LwM2M temperature object per observation."""

    sink = constants.OUTPUT_LWM2M

    def __init__(
        self,
        api_client: "LwM2MAPI",
        include_record_time: bool = False,
        stop_on_error: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(stop_on_error=stop_on_error, logger=logger)
        self.api_client = api_client
        self.include_record_time = include_record_time

    def pack(self, observation: TemperatureObservation) -> List[Dict[str, Any]]:
        """SenML pack for an observation, addressed to its internal id."""
        return temperature_pack(
            observation.internal_id,
            observation.temperature,
            observation.observed_at,
            include_record_time=self.include_record_time,
        )

    def publish_observation(self, observation: TemperatureObservation) -> None:
        site_logger(self.logger, observation.nuts_code, self.sink).info(
            f"Sending pack for {observation.internal_id} at {observation.observed_at.isoformat()}"
        )
        self.api_client.post_pack(self.pack(observation))
