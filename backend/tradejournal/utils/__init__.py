"""
TradeJournal Utilities Package

This package contains helper modules shared by the TradeJournal services.
"""

__all__ = [
    'time_utils',
]
