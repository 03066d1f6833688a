"""API routers for all endpoints."""

from faultlens.routers import anomaly, system

__all__ = ["anomaly", "system"]
