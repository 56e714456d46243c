"""
Central constants for the recession classifier engine.

Single source of truth for the default parameter grids used to build
indicator families, the threshold grid swept by the classifier search,
and the timeline precision shared by every date comparison.

"""

import numpy as np

# Timeline
MONTHS_PER_YEAR = 12
TIMELINE_DECIMALS = 2  # Decimal-year dates are rounded for safe equality checks

# Smoothing grids
SMA_WINDOWS = list(range(0, 12))                            # Backward windows, 0-11 months
EMA_WEIGHTS = [round(0.1 * i, 1) for i in range(1, 11)]     # Decay weights 0.1-1.0

# Curvature grid: 0 = log, 1 = linear
CURVING_PARAMETERS = [round(0.1 * i, 1) for i in range(0, 11)]

# Turning-point windows in months (trailing window spans w + 1 months)
TURNING_WINDOWS = list(range(1, 19))

# Mixing weights for linear and minmax combinations
MIXING_WEIGHTS = [round(0.1 * i, 1) for i in range(0, 11)]

# Threshold grid swept by the perfect classifier search
THRESHOLD_START = 0.0001
THRESHOLD_STOP = 0.5
THRESHOLD_STEP = 0.0001
THRESHOLD_DECIMALS = 4

# Ensemble selection: maximum standard deviation of timing errors (months)
STD_ERROR_MAX = 3.0

# Family sizes implied by the default grids
N_SMOOTHING = len(SMA_WINDOWS) + len(EMA_WEIGHTS)                         # 22
N_INDICATORS = N_SMOOTHING * len(CURVING_PARAMETERS) * len(TURNING_WINDOWS)  # 4,356
N_MIXING_METHODS = 2
N_MIXED_PER_INDICATOR = N_MIXING_METHODS * len(MIXING_WEIGHTS)             # 22

# Parameter tag columns carried alongside every indicator column
PARAMETER_COLUMNS = [
    "smoothing_method",
    "smoothing_parameter",
    "curving_parameter",
    "turning_parameter",
    "mixing_method",
    "mixing_parameter",
]


def default_threshold_grid() -> np.ndarray:
    """Threshold grid 0.0001 to 0.5 in steps of 0.0001 (5,000 values)."""
    n = int(round((THRESHOLD_STOP - THRESHOLD_START) / THRESHOLD_STEP)) + 1
    return np.round(THRESHOLD_START + THRESHOLD_STEP * np.arange(n), THRESHOLD_DECIMALS)
