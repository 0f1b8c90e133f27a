"""
Context broker publisher.

Publishes observations as WaterQualityObserved entities using merge-then-create.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

from .publisher import Publisher
from ..core import constants
from ..core.date_utils import DateUtils
from ..core.errors import EntityAlreadyExistsError, EntityNotFoundError
from ..models import (
    ContextProperty,
    DateTimeProperty,
    LocationProperty,
    NumberProperty,
    TemperatureObservation,
    TextProperty,
    build_entity,
    build_fragment,
)
from ..models.properties import Contribution

if TYPE_CHECKING:
    from ..api import ContextBrokerAPI


class EntityStorePublisher(Publisher):
    """Upsert WaterQualityObserved entities in an NGSI-LD context broker."""

    sink = constants.OUTPUT_FIWARE

    def __init__(
        self,
        api_client: "ContextBrokerAPI",
        identity_mode: str = constants.IDENTITY_PER_LOCATION,
        stop_on_error: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize publisher.

        Args:
            api_client: Context broker client
            identity_mode: 'location' for one entity per bathing site, merged
                           on every run, or 'observation' for one entity per reading
            stop_on_error: Raise the first hard failure
            logger: Logger instance
        """
        super().__init__(stop_on_error=stop_on_error, logger=logger)
        if identity_mode not in constants.IDENTITY_MODES:
            raise ValueError(f"Invalid identity mode: {identity_mode}")
        self.api_client = api_client
        self.identity_mode = identity_mode

    def entity_id(self, observation: TemperatureObservation) -> str:
        """Canonical entity id of an observation."""
        prefix = constants.WATER_QUALITY_OBSERVED_ID_PREFIX

        if self.identity_mode == constants.IDENTITY_PER_OBSERVATION:
            return f"{prefix}{observation.nuts_code}:{DateUtils.to_compact_utc(observation.observed_at)}"

        return f"{prefix}{observation.internal_id}"

    @staticmethod
    def properties(observation: TemperatureObservation) -> List[Contribution]:
        """Property contributions describing an observation."""
        observed_at = DateUtils.to_rfc3339_nano(observation.observed_at)
        return [
            ContextProperty(),
            LocationProperty(observation.latitude, observation.longitude),
            DateTimeProperty(observed_at),
            NumberProperty("temperature", observation.temperature, observed_at=observed_at),
            TextProperty("source", observation.source),
        ]

    def publish_observation(self, observation: TemperatureObservation) -> None:
        """
        Merge the observation into its entity, creating the entity if needed.

        Raises:
            DownstreamError: If neither merge nor create succeeded
        """
        entity_id = self.entity_id(observation)
        properties = self.properties(observation)

        try:
            self.api_client.merge_entity(entity_id, build_fragment(properties))
            self.logger.debug(f"Merged {entity_id}")
            return
        except EntityNotFoundError:
            self.logger.debug(f"{entity_id} not found, creating it")

        entity = build_entity(entity_id, constants.WATER_QUALITY_OBSERVED_TYPE, properties)
        try:
            self.api_client.create_entity(entity)
            self.logger.debug(f"Created {entity_id}")
        except EntityAlreadyExistsError:
            self.logger.debug(f"Entity {entity_id} already existed")
