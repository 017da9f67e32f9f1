"""API routers."""

from api.routers import credentials, sweep

__all__ = ["credentials", "sweep"]
