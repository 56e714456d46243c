"""
True event dates.

Ordered (start, end) decimal-year pairs for known historical events.
Only start dates are consumed by the classifier search and frontier
selection; their count is the target count for perfect classifiers.
"""

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd

from recession_lib.constants import MONTHS_PER_YEAR, TIMELINE_DECIMALS
from recession_lib.data_validation import DataValidator


@dataclass(frozen=True, eq=False)
class TrueEvents:
    """
    Known historical events (e.g. official recessions).

    Attributes
    ----------
    starts : np.ndarray
        Event start dates in decimal years, chronologically ordered
    ends : np.ndarray
        Event end dates in decimal years (same length as starts)
    label : str
        Human-readable name of the event set
    """
    starts: np.ndarray
    ends: np.ndarray
    label: str = field(default="events", compare=False)

    def __post_init__(self):
        frame = DataValidator.validate_events(
            pd.DataFrame({
                "start": np.asarray(self.starts, dtype=float),
                "end": np.asarray(self.ends, dtype=float),
            }),
            context=self.label,
        )
        order = np.argsort(frame["start"].to_numpy(), kind="stable")
        object.__setattr__(self, "starts", frame["start"].to_numpy()[order])
        object.__setattr__(self, "ends", frame["end"].to_numpy()[order])

    @classmethod
    def from_starts(cls, starts: Sequence[float], label: str = "events") -> "TrueEvents":
        """Events known only by their start dates (e.g. placebo events)."""
        starts = np.asarray(starts, dtype=float)
        return cls(starts=starts, ends=starts.copy(), label=label)

    @classmethod
    def from_peaks_troughs(
        cls,
        peaks: Sequence[float],
        troughs: Sequence[float],
        label: str = "recessions"
    ) -> "TrueEvents":
        """
        Build recessions from business-cycle peaks and troughs.

        A recession starts the month after the peak and ends at the trough.
        """
        # Month arithmetic on integer month counts
        months = np.round(np.asarray(peaks, dtype=float) * MONTHS_PER_YEAR) + 1
        starts = np.round(months / MONTHS_PER_YEAR, TIMELINE_DECIMALS)
        return cls(starts=starts, ends=np.asarray(troughs, dtype=float), label=label)

    def within(self, begin: float, end: float) -> "TrueEvents":
        """Events whose start date falls within [begin, end]."""
        mask = (self.starts >= round(begin, TIMELINE_DECIMALS)) & (self.starts <= round(end, TIMELINE_DECIMALS))
        return TrueEvents(starts=self.starts[mask], ends=self.ends[mask], label=self.label)

    @property
    def count(self) -> int:
        """Number of events (the target count for perfect classifiers)."""
        return int(len(self.starts))

    def __len__(self) -> int:
        return self.count

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"start": self.starts, "end": self.ends})
