"""
Signal Engine

CONTRACT:
    Input:  candles per timeframe + current price
    Output: Signal per timeframe, harmonized into a TimeframeSet
"""

from mtf_signals.services.strategy.service import EPOCH, SignalEngine, get_signal_engine

__all__ = ["EPOCH", "SignalEngine", "get_signal_engine"]
