"""API Routes."""
from carbon_takeoff.presentation.api.routes import carbon, designs, takeoffs

__all__ = ["takeoffs", "carbon", "designs"]
