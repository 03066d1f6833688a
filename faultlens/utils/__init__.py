"""Utility modules for logging, request tracing, and common helpers."""

from faultlens.utils.logging import (
    bind_request,
    configure_logging,
    current_request_id,
    get_logger,
    log_event,
)

__all__ = ["bind_request", "configure_logging", "current_request_id", "get_logger", "log_event"]
