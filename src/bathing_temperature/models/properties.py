"""
NGSI-LD property contributions.

Entity fragments are built from an ordered list of typed contributions, each
of which renders one member of the resulting JSON-LD document.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..core import constants


@dataclass(frozen=True)
class ContextProperty:
    """JSON-LD @context of the entity."""

    context: Tuple[str, ...] = (constants.NGSI_LD_DEFAULT_CONTEXT,)

    def render(self) -> Tuple[str, Any]:
        return "@context", list(self.context)


@dataclass(frozen=True)
class LocationProperty:
    """GeoProperty holding a WGS84 point."""

    latitude: float
    longitude: float
    name: str = "location"

    def render(self) -> Tuple[str, Any]:
        return self.name, {
            "type": "GeoProperty",
            "value": {
                "type": "Point",
                "coordinates": [self.longitude, self.latitude],
            },
        }


@dataclass(frozen=True)
class DateTimeProperty:
    """Property holding an RFC 3339 timestamp."""

    value: str
    name: str = "dateObserved"

    def render(self) -> Tuple[str, Any]:
        return self.name, {
            "type": "Property",
            "value": {
                "@type": "DateTime",
                "@value": self.value,
            },
        }


@dataclass(frozen=True)
class NumberProperty:
    """Numeric property, optionally tagged with the time it was observed."""

    name: str
    value: float
    observed_at: Optional[str] = None

    def render(self) -> Tuple[str, Any]:
        prop: Dict[str, Any] = {"type": "Property", "value": self.value}
        if self.observed_at:
            prop["observedAt"] = self.observed_at
        return self.name, prop


@dataclass(frozen=True)
class TextProperty:
    """Text property."""

    name: str
    value: str

    def render(self) -> Tuple[str, Any]:
        return self.name, {"type": "Property", "value": self.value}


Contribution = Union[ContextProperty, LocationProperty, DateTimeProperty, NumberProperty, TextProperty]


def build_fragment(contributions: Iterable[Contribution]) -> Dict[str, Any]:
    """
    Fold property contributions into an entity fragment.

    Later contributions with the same member name replace earlier ones.

    Args:
        contributions: Ordered property contributions

    Returns:
        New fragment dictionary

    Raises:
        ValueError: If no contribution is given
    """
    fragment: Dict[str, Any] = {}
    for contribution in contributions:
        key, value = contribution.render()
        fragment[key] = value

    if not fragment:
        raise ValueError("at least one property must be set in an entity fragment")

    return fragment


def build_entity(entity_id: str, entity_type: str, contributions: Iterable[Contribution]) -> Dict[str, Any]:
    """
    Build a complete entity from property contributions.

    Args:
        entity_id: Entity id (URN)
        entity_type: Entity type name
        contributions: Ordered property contributions

    Returns:
        New entity dictionary with id and type first
    """
    entity: Dict[str, Any] = {"id": entity_id, "type": entity_type}
    entity.update(build_fragment(contributions))
    return entity
