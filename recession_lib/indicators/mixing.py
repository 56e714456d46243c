"""
Mixing of two indicator families.

Combines two families of identical shape and tags (e.g. built from
unemployment and vacancy rates) column by column:
- Linear: z = zeta * x + (1 - zeta) * y (convex combination)
- Minmax: z = zeta * min(x, y) + (1 - zeta) * max(x, y) (robust combination)

Output column order: method (linear block, then minmax block), then mixing
weight, then the input column order::

    index = i_column + n_columns * (i_weight + n_weights * i_method)
"""

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from recession_lib.config_schemas import ConfigurationError
from recession_lib.constants import MIXING_WEIGHTS
from recession_lib.indicators.family import IndicatorFamily
from recession_lib.logging_config import InstrumentedLogger

instrumented_logger = InstrumentedLogger(__name__)

MIXING_METHODS = ('linear', 'minmax')


def mix_indicator(
    first: IndicatorFamily,
    second: IndicatorFamily,
    weights: Optional[Sequence[float]] = None
) -> IndicatorFamily:
    """
    Produce linear and minmax mixtures of two indicator families.

    Parameters
    ----------
    first : IndicatorFamily
        First family (x in the mixing formulas)
    second : IndicatorFamily
        Second family (y), same shape and parameter tags as first
    weights : sequence of float, optional
        Mixing weights zeta (default 0.0-1.0 in steps of 0.1)

    Returns
    -------
    IndicatorFamily
        2 * len(weights) * n_columns columns, tagged with mixing method
        and weight on top of the shared input tags

    Raises
    ------
    ConfigurationError
        If shapes, parameter tags or timelines differ
    """
    weights = list(MIXING_WEIGHTS if weights is None else weights)
    if not weights:
        raise ConfigurationError("Mixing weight grid must not be empty")

    if first.shape != second.shape:
        raise ConfigurationError(
            f"Indicator families must have the same shape: {first.shape} vs {second.shape}"
        )
    if not first.same_tags(second):
        raise ConfigurationError("Parameter structures of the two indicator families do not match")
    if first.timeline is not None and second.timeline is not None:
        if not np.array_equal(first.timeline, second.timeline):
            raise ConfigurationError("Indicator families are aligned to different timelines")
    timeline = first.timeline if first.timeline is not None else second.timeline

    x = first.values
    y = second.values
    lower = np.minimum(x, y)
    upper = np.maximum(x, y)

    m = first.n_columns
    n_block = len(weights)
    out = np.empty((first.n_month, len(MIXING_METHODS) * n_block * m))
    blocks = []

    base = first.parameters.reset_index(drop=True)
    for i_method, method in enumerate(MIXING_METHODS):
        for i_weight, zeta in enumerate(weights):
            start = (i_method * n_block + i_weight) * m
            if method == 'linear':
                out[:, start:start + m] = zeta * x + (1 - zeta) * y
            else:
                out[:, start:start + m] = zeta * lower + (1 - zeta) * upper
            blocks.append(base.assign(mixing_method=method, mixing_parameter=float(zeta)))

    mixed = IndicatorFamily(out, pd.concat(blocks, ignore_index=True), timeline)

    instrumented_logger.log_data_transform(
        "mix_indicator",
        output_data=mixed.values,
        metadata={
            "n_input_columns": m,
            "n_weights": n_block,
            "n_columns": mixed.n_columns,
        }
    )
    return mixed
