"""
Expansion/recession event state machine.

Every indicator column starts in expansion. Month by month (t = 0 .. n-2),
the values at t and t+1 decide the state occupied at t+1:
- Expansion -> Recession when the indicator rises through the threshold,
  value[t] < threshold <= value[t+1]; this is one detected event dated at
  month t+1.
- Recession -> Expansion when value[t+1] == 0 exactly.
- Otherwise the state persists.

Recession duration resets to 0 in expansion and counts months spent in
recession, so the detection month has duration 1.

The recurrence is a causal scan over time, batched across columns. The
classifier search and the probability scorer run the same transition.
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
from numba import njit


@njit
def _transition(in_recession: bool, previous: float, current: float, threshold: float):
    """Return (next state is recession, new event detected)."""
    state = in_recession
    event = False
    if not in_recession:
        if previous < threshold and current >= threshold:
            state = True
            event = True
    elif current == 0.0:
        state = False
    return state, event


@njit
def _scan_states(values: np.ndarray, thresholds: np.ndarray):
    n, m = values.shape
    in_recession = np.zeros((n, m), dtype=np.bool_)
    started = np.zeros((n, m), dtype=np.bool_)
    duration = np.zeros((n, m), dtype=np.int64)
    for t in range(n - 1):
        for j in range(m):
            state, event = _transition(in_recession[t, j], values[t, j], values[t + 1, j], thresholds[j])
            in_recession[t + 1, j] = state
            started[t + 1, j] = event
            if state:
                duration[t + 1, j] = duration[t, j] + 1
    return in_recession, started, duration


@njit
def _count_events(values: np.ndarray, threshold: float, max_events: int):
    n, m = values.shape
    counts = np.zeros(m, dtype=np.int64)
    start_rows = np.full((m, max_events), -1, dtype=np.int64)
    in_recession = np.zeros(m, dtype=np.bool_)
    for t in range(n - 1):
        for j in range(m):
            state, event = _transition(in_recession[j], values[t, j], values[t + 1, j], threshold)
            if event:
                k = counts[j]
                if k < max_events:
                    start_rows[j, k] = t + 1
                counts[j] = k + 1
            in_recession[j] = state
    return counts, start_rows


@dataclass
class EventTrace:
    """
    Monthly states produced by the state machine.

    Attributes
    ----------
    in_recession : np.ndarray
        Bool matrix [n_month x n_columns], True while in recession
    started : np.ndarray
        Bool matrix [n_month x n_columns], True at each detected event month
    duration : np.ndarray
        Int matrix [n_month x n_columns], months spent in the current recession
    """
    in_recession: np.ndarray
    started: np.ndarray
    duration: np.ndarray

    @property
    def n_events(self) -> np.ndarray:
        """Number of detected events per column."""
        return self.started.sum(axis=0)

    def start_rows(self, column: int) -> np.ndarray:
        """Chronological month positions of the events detected by one column."""
        return np.flatnonzero(self.started[:, column])


def _as_matrix(values: np.ndarray) -> np.ndarray:
    arr = np.ascontiguousarray(values, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ValueError(f"Indicator values must be 1-D or 2-D, got shape {arr.shape}")
    return arr


def detect_events(
    values: np.ndarray,
    thresholds: Union[float, np.ndarray]
) -> EventTrace:
    """
    Run the state machine over every column.

    Parameters
    ----------
    values : np.ndarray
        Indicator vector [n_month] or matrix [n_month x n_columns]
    thresholds : float or np.ndarray
        One threshold for all columns, or one per column

    Returns
    -------
    EventTrace
        States, event flags and recession durations
    """
    arr = _as_matrix(values)
    thresholds = np.array(np.broadcast_to(np.asarray(thresholds, dtype=np.float64), (arr.shape[1],)))
    in_recession, started, duration = _scan_states(arr, thresholds)
    return EventTrace(in_recession=in_recession, started=started, duration=duration)


def count_events(
    values: np.ndarray,
    threshold: float,
    max_events: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Count detected events per column for a single threshold.

    Lighter than detect_events: keeps only the month positions of the first
    `max_events` events of each column.

    Parameters
    ----------
    values : np.ndarray
        Indicator matrix [n_month x n_columns]
    threshold : float
        Threshold shared by all columns
    max_events : int
        Number of event positions recorded per column

    Returns
    -------
    tuple
        (counts [n_columns], start_rows [n_columns x max_events], -1 padded)
    """
    return _count_events(_as_matrix(values), float(threshold), int(max_events))
