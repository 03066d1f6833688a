"""
System health and configuration router.

Wired to:
- Settings for environment reporting
- The shared AnomalyService for the decision constants in force
"""

import time

from fastapi import APIRouter, Depends

from faultlens.config import get_settings
from faultlens.engine import __version__ as engine_version
from faultlens.models.enums import FEATURE_PRIORITY
from faultlens.routers.anomaly import get_anomaly_service
from faultlens.services.anomaly_service import AnomalyService
from faultlens.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

# Track startup time for uptime calculation
_startup_time = time.time()


@router.get("/health")
async def system_health():
    """Get system health status."""
    settings = get_settings()
    uptime = time.time() - _startup_time

    return {
        "success": True,
        "data": {
            "status": "healthy",
            "version": engine_version,
            "uptime_seconds": round(uptime, 1),
            "environment": settings.environment,
        },
    }


@router.get("/config")
async def system_config(service: AnomalyService = Depends(get_anomaly_service)):
    """
    Report the decision constants in force.
    Thresholds, operating bands, causal table and tie-break priority.
    """
    logger.info("config_request")

    th = service.classifier.thresholds
    return {
        "success": True,
        "data": {
            "thresholds": {
                "warning_temp": th.warning_temp,
                "critical_temp": th.critical_temp,
                "warning_current": th.warning_current,
                "critical_current": th.critical_current,
            },
            "feature_bands": {
                feature.value: {"center": band.center, "scale": band.scale}
                for feature, band in service.attributor.bands.items()
            },
            "causal_table": {
                feature.value: cause.value
                for feature, cause in service.mapper.causal_table.items()
            },
            "feature_priority": [feature.value for feature in FEATURE_PRIORITY],
            "contribution_precision": service.attributor.precision,
            "max_batch_size": service.max_batch_size,
        },
    }
