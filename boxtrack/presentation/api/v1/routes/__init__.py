"""API v1 routers."""

from boxtrack.presentation.api.v1.routes import codes, containers, locations

__all__ = ["codes", "containers", "locations"]
