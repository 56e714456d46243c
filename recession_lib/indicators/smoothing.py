"""
Smoothing filters for raw monthly series.

Numba-accelerated backward moving averages and exponential filters.
"""

from typing import List, Tuple

import numpy as np
from numba import njit


@njit
def backward_moving_average(x: np.ndarray, window: int) -> np.ndarray:
    """
    Backward-looking moving average over the current and `window` previous months.

    The window is truncated at the start of the sample, so early values
    average over the months available.

    Parameters
    ----------
    x : np.ndarray
        Raw monthly series
    window : int
        Number of previous months included (0 returns the raw series)

    Returns
    -------
    np.ndarray
        Smoothed series, same length as x
    """
    n = len(x)
    out = np.empty(n)
    for t in range(n):
        lo = max(0, t - window)
        total = 0.0
        for s in range(lo, t + 1):
            total += x[s]
        out[t] = total / (t + 1 - lo)
    return out


@njit
def exponential_moving_average(x: np.ndarray, weight: float) -> np.ndarray:
    """
    Exponential filter y[t] = weight * x[t] + (1 - weight) * y[t-1].

    The filter state is seeded with (1 - weight) * x[0], so the first output
    is the first observation rather than a cold start from zero.

    Parameters
    ----------
    x : np.ndarray
        Raw monthly series
    weight : float
        Decay weight in (0, 1]

    Returns
    -------
    np.ndarray
        Smoothed series, same length as x
    """
    n = len(x)
    out = np.empty(n)
    if n == 0:
        return out
    state = (1.0 - weight) * x[0]
    for t in range(n):
        out[t] = weight * x[t] + state
        state = (1.0 - weight) * out[t]
    return out


def smooth_series(
    raw: np.ndarray,
    sma_windows: List[int],
    ema_weights: List[float]
) -> Tuple[np.ndarray, List[Tuple[str, float]]]:
    """
    Apply every smoothing setting to a raw series.

    Parameters
    ----------
    raw : np.ndarray
        Raw monthly series
    sma_windows : list[int]
        Moving-average windows
    ema_weights : list[float]
        Exponential decay weights

    Returns
    -------
    tuple
        (smoothed matrix [n_month x n_smoothing], [(method, parameter), ...])
        SMA columns come first, then EMA columns.
    """
    raw = np.ascontiguousarray(raw, dtype=np.float64)
    columns = []
    tags = []

    for window in sma_windows:
        columns.append(backward_moving_average(raw, int(window)))
        tags.append(('SMA', float(window)))

    for weight in ema_weights:
        columns.append(exponential_moving_average(raw, float(weight)))
        tags.append(('EMA', float(weight)))

    return np.column_stack(columns), tags
