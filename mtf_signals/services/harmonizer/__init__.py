"""
Timeframe Harmonizer

CONTRACT:
    Input:  TimeframeSet (independently computed signals)
    Output: TimeframeSet (higher timeframes cascaded onto lower ones)
"""

from mtf_signals.services.harmonizer.service import TimeframeHarmonizer

__all__ = ["TimeframeHarmonizer"]
