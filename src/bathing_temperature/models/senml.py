"""
SenML (RFC 8428) records for LwM2M objects.

A pack is built from an ordered list of typed records: a base record naming
the device, object and time, followed by resource value records.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..core import constants
from ..core.date_utils import DateUtils


@dataclass(frozen=True)
class SenMLRecord:
    """One SenML record. Unset fields are omitted from the JSON form."""

    base_name: Optional[str] = None
    base_time: Optional[float] = None
    name: Optional[str] = None
    unit: Optional[str] = None
    value: Optional[float] = None
    string_value: Optional[str] = None
    bool_value: Optional[bool] = None
    time: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        labels = (
            ("bn", self.base_name),
            ("bt", self.base_time),
            ("n", self.name),
            ("u", self.unit),
            ("v", self.value),
            ("vs", self.string_value),
            ("vb", self.bool_value),
            ("t", self.time),
        )
        return {label: value for label, value in labels if value is not None}


def base_record(device_id: str, object_id: str, object_urn: str, timestamp: datetime) -> SenMLRecord:
    """
    Base record identifying an LwM2M object instance.

    Args:
        device_id: Device identifier
        object_id: LwM2M object id (e.g. 3303)
        object_urn: Object URN carried as the string value of resource 0
        timestamp: Base time of the pack
    """
    return SenMLRecord(
        base_name=f"{device_id}/{object_id}/",
        base_time=float(DateUtils.to_unix_seconds(timestamp)),
        name="0",
        string_value=object_urn,
    )


def value_record(
    resource_id: str,
    value: float,
    unit: str = "",
    offset: Optional[float] = None
) -> SenMLRecord:
    """
    Numeric resource value.

    Args:
        resource_id: LwM2M resource id (e.g. 5700 for sensor value)
        value: Resource value
        unit: SenML unit symbol
        offset: Time of the value relative to the base time, in seconds
    """
    return SenMLRecord(name=resource_id, value=value, unit=unit or None, time=offset)


def build_pack(records: Iterable[SenMLRecord]) -> List[Dict[str, Any]]:
    """
    Serialize records into a SenML pack.

    Raises:
        ValueError: If the first record carries no base name
    """
    pack = [record.to_dict() for record in records]
    if not pack or "bn" not in pack[0]:
        raise ValueError("a SenML pack must start with a base record")
    return pack


def temperature_pack(
    device_id: str,
    temperature: float,
    observed_at: datetime,
    include_record_time: bool = False
) -> List[Dict[str, Any]]:
    """
    SenML pack for an LwM2M temperature object (3303).

    Args:
        device_id: Device identifier
        temperature: Sensor value in °C
        observed_at: Time of the reading
        include_record_time: Tag the value record with its own time
    """
    return build_pack([
        base_record(device_id, constants.TEMPERATURE_OBJECT_ID, constants.TEMPERATURE_URN, observed_at),
        value_record(
            constants.SENSOR_VALUE_RESOURCE,
            temperature,
            constants.SENML_UNIT_CELSIUS,
            offset=0.0 if include_record_time else None,
        ),
    ])


def normalize_pack(pack: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Resolve base fields into each record (RFC 8428 section 4.6).

    Returns:
        Resolved records, each with a full name and absolute time
    """
    resolved = []
    base_name = ""
    base_time = 0.0
    base_unit = None

    for record in pack:
        base_name = record.get("bn", base_name)
        base_time = record.get("bt", base_time)
        base_unit = record.get("bu", base_unit)

        entry = {k: v for k, v in record.items() if k not in ("bn", "bt", "bu")}
        entry["n"] = base_name + record.get("n", "")
        entry["t"] = base_time + record.get("t", 0.0)
        if "u" not in entry and base_unit:
            entry["u"] = base_unit
        resolved.append(entry)

    return resolved
