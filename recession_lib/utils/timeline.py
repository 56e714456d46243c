"""
Decimal-year timeline helpers.

Monthly dates are represented as ``year + (month - 1) / 12`` and rounded to
``TIMELINE_DECIMALS`` so that dates produced by different loaders compare
equal.
"""

from typing import Union

import numpy as np

from recession_lib.constants import MONTHS_PER_YEAR, TIMELINE_DECIMALS


def decimal_year(year: Union[int, np.ndarray], month: Union[int, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Convert calendar year/month to a rounded decimal-year date.

    Parameters
    ----------
    year : int or np.ndarray
        Calendar year(s)
    month : int or np.ndarray
        Calendar month(s), 1-12

    Returns
    -------
    float or np.ndarray
        Decimal-year date(s)
    """
    month = np.asarray(month)
    if np.any((month < 1) | (month > MONTHS_PER_YEAR)):
        raise ValueError(f"Month must be in 1-12, got {month}")
    result = np.round(np.asarray(year) + (month - 1) / MONTHS_PER_YEAR, TIMELINE_DECIMALS)
    return float(result) if result.ndim == 0 else result


def make_timeline(begin: float, end: float) -> np.ndarray:
    """
    Build a monthly decimal-year timeline from begin to end inclusive.

    Parameters
    ----------
    begin : float
        First month (decimal year)
    end : float
        Last month (decimal year)

    Returns
    -------
    np.ndarray
        Strictly increasing dates, 1/12 apart, rounded to TIMELINE_DECIMALS
    """
    if end < begin:
        raise ValueError(f"Timeline end {end} precedes begin {begin}")
    n_month = int(round((end - begin) * MONTHS_PER_YEAR)) + 1
    return np.round(begin + np.arange(n_month) / MONTHS_PER_YEAR, TIMELINE_DECIMALS)


def window_mask(timeline: np.ndarray, begin: float, end: float) -> np.ndarray:
    """Boolean mask selecting dates with begin <= date <= end."""
    begin = round(begin, TIMELINE_DECIMALS)
    end = round(end, TIMELINE_DECIMALS)
    return (timeline >= begin) & (timeline <= end)
