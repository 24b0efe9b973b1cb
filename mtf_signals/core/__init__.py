from mtf_signals.core.config import Settings, get_settings
from mtf_signals.core.logging import setup_logging

__all__ = ["Settings", "get_settings", "setup_logging"]
