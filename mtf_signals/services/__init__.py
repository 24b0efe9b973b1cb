"""
Engine services.

Pipeline: Indicators -> Levels/Patterns -> Scoring -> Risk -> Harmonizer
"""

from mtf_signals.services.base import BaseService, ConfigurationError, ServiceError

__all__ = ["BaseService", "ConfigurationError", "ServiceError"]
