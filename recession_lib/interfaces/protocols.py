"""
Source Protocols.

Minimal interfaces for the external collaborators that feed the engine.

Design principles:
- Sources return Timeline-aligned facts only, already spliced and rounded
- The engine receives everything as explicit parameters, never via globals

"""

from typing import Protocol, runtime_checkable

import numpy as np

from .events import TrueEvents


@runtime_checkable
class RawSeriesSource(Protocol):
    """
    Supplies a monthly labor-market rate for a date window.

    Used by: RecessionPipeline callers (unemployment, vacancy loaders)
    """

    def load(self, begin: float, end: float) -> np.ndarray:
        """Return one value per month from begin to end inclusive."""
        ...


@runtime_checkable
class TrueEventsSource(Protocol):
    """
    Supplies known historical event dates for a date window.

    Used by: RecessionPipeline callers (official recession dates, placebos)
    """

    def load(self, begin: float, end: float) -> TrueEvents:
        """Return events whose start date falls within [begin, end]."""
        ...
