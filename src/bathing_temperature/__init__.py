"""
Bathing Water Temperature Integration

This package collects bathing water temperatures from the Havochvatten
open-data API and publishes them to an NGSI-LD context broker or to an
LwM2M telemetry endpoint.
"""

__version__ = "0.1.0"
__description__ = "Bathing water temperature integration for Havochvatten data"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "BathingTemperatureApp":
        from .main import BathingTemperatureApp
        return BathingTemperatureApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BathingTemperatureApp",
]
