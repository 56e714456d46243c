"""Recession indicator construction.

Builds tagged families of indicators from raw labor-market series
(smoothing x curvature x turning point) and mixes two families into a
combined family.
"""

from .smoothing import (
    backward_moving_average,
    exponential_moving_average,
    smooth_series,
)
from .curvature import curve
from .turning import (
    trailing_min_distance,
    trailing_max_distance,
    turning_distance,
)
from .family import (
    Cyclicality,
    ParameterTuple,
    IndicatorFamily,
    build_indicator,
)
from .mixing import MIXING_METHODS, mix_indicator

__all__ = [
    # Smoothing
    'backward_moving_average',
    'exponential_moving_average',
    'smooth_series',

    # Curvature
    'curve',

    # Turning points
    'trailing_min_distance',
    'trailing_max_distance',
    'turning_distance',

    # Families
    'Cyclicality',
    'ParameterTuple',
    'IndicatorFamily',
    'build_indicator',

    # Mixing
    'MIXING_METHODS',
    'mix_indicator',
]
