"""
Turning-point distance indicators.

Distance of the current value from its trailing extremum. The result is
non-negative and exactly zero whenever the current month is itself the
trailing extremum, which the event state machine reads as a return to
expansion.
"""

import numpy as np
from numba import njit


@njit
def trailing_min_distance(values: np.ndarray, window: int) -> np.ndarray:
    """
    Current value minus the minimum over the trailing window + 1 months.

    Parameters
    ----------
    values : np.ndarray
        Matrix [n_month x n_series]
    window : int
        Number of previous months included in the trailing window

    Returns
    -------
    np.ndarray
        Non-negative distances, same shape as values
    """
    n, m = values.shape
    out = np.empty((n, m))
    for t in range(n):
        lo = max(0, t - window)
        for j in range(m):
            current = values[t, j]
            lowest = current
            for s in range(lo, t):
                if values[s, j] < lowest:
                    lowest = values[s, j]
            out[t, j] = current - lowest
    return out


@njit
def trailing_max_distance(values: np.ndarray, window: int) -> np.ndarray:
    """
    Maximum over the trailing window + 1 months minus the current value.

    Parameters
    ----------
    values : np.ndarray
        Matrix [n_month x n_series]
    window : int
        Number of previous months included in the trailing window

    Returns
    -------
    np.ndarray
        Non-negative distances, same shape as values
    """
    n, m = values.shape
    out = np.empty((n, m))
    for t in range(n):
        lo = max(0, t - window)
        for j in range(m):
            current = values[t, j]
            highest = current
            for s in range(lo, t):
                if values[s, j] > highest:
                    highest = values[s, j]
            out[t, j] = highest - current
    return out


def turning_distance(values: np.ndarray, window: int, procyclical: bool) -> np.ndarray:
    """
    Distance from the trailing local minimum (countercyclical series) or
    local maximum (procyclical series).

    Parameters
    ----------
    values : np.ndarray
        Vector [n_month] or matrix [n_month x n_series]
    window : int
        Turning window in months (>= 1)
    procyclical : bool
        True for series that fall in recessions

    Returns
    -------
    np.ndarray
        Distances, same shape as values
    """
    if window < 1:
        raise ValueError(f"Turning window must be >= 1, got {window}")
    arr = np.ascontiguousarray(values, dtype=np.float64)
    squeeze = arr.ndim == 1
    if squeeze:
        arr = arr.reshape(-1, 1)
    if procyclical:
        out = trailing_max_distance(arr, int(window))
    else:
        out = trailing_min_distance(arr, int(window))
    return out[:, 0] if squeeze else out
