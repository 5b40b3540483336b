"""Carbon Takeoff.

Quantity takeoff, classification and embodied carbon estimation for BIM
designs hosted on Autodesk Platform Services.
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
