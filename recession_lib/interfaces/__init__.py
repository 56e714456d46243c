"""
Core interfaces for the recession classifier engine.

External loaders supply raw series and true event dates through these
protocols; the engine itself never performs I/O.
"""

from .events import TrueEvents
from .protocols import RawSeriesSource, TrueEventsSource

__all__ = [
    'TrueEvents',
    'RawSeriesSource',
    'TrueEventsSource',
]
