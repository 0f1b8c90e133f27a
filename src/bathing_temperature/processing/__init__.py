"""
Processing of upstream records into temperature observations.
"""

from .reconciler import TemperatureReconciler

__all__ = [
    "TemperatureReconciler",
]
