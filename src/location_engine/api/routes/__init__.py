"""Route group exports."""

from . import health, location, service_areas

__all__ = ["health", "location", "service_areas"]
