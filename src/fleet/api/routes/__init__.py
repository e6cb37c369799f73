"""Route group exports."""

from . import health, hubs, routes, vehicles

__all__ = ["health", "vehicles", "routes", "hubs"]
