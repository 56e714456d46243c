"""
Box-Cox style curvature transform.

k = 0 gives the natural log, k = 1 a shifted linear series; values in
between bend the series progressively from linear to logarithmic.
"""

import numpy as np


def curve(x: np.ndarray, k: float) -> np.ndarray:
    """
    Apply the monotone concave transform (x^k - 1) / k, or log(x) when k = 0.

    Parameters
    ----------
    x : np.ndarray
        Positive input values (any shape)
    k : float
        Curvature parameter in [0, 1]

    Returns
    -------
    np.ndarray
        Transformed values, same shape as x
    """
    if k < 0:
        raise ValueError(f"Curving parameter must be non-negative, got {k}")
    if k == 0:
        return np.log(x)
    return (np.power(x, k) - 1.0) / k
