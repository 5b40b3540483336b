"""Shared module.

Cross-cutting concerns: configuration, logging, result pattern, cancellation.
"""
from carbon_takeoff.shared.cancellation import CancellationToken
from carbon_takeoff.shared.config import Settings, get_settings

__all__ = [
    "CancellationToken",
    "Settings",
    "get_settings",
]
