"""
Business logic layer.
Services validate requests and orchestrate the decision engine.
"""

from faultlens.services.anomaly_service import AnomalyService

__all__ = ["AnomalyService"]
