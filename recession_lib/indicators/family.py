"""
Tagged indicator families.

An IndicatorFamily is a matrix of Timeline-aligned indicator columns paired
1:1 with a parameter table describing how each column was derived. Every
construction stage is a Cartesian expansion of the previous family; column
and tag order are produced by the same operation so they cannot drift
apart.

Column order for one raw series (smoothing fastest, then curvature, then
turning window)::

    index = i_smoothing + n_smoothing * (i_curving + n_curving * i_turning)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from recession_lib.config_schemas import ConfigurationError, IndicatorGridConfig
from recession_lib.constants import PARAMETER_COLUMNS
from recession_lib.data_validation import DataValidator
from recession_lib.indicators.curvature import curve
from recession_lib.indicators.smoothing import smooth_series
from recession_lib.indicators.turning import turning_distance
from recession_lib.logging_config import InstrumentedLogger
from recession_lib.utils.timeline import window_mask

instrumented_logger = InstrumentedLogger(__name__)


class Cyclicality(Enum):
    """
    Behaviour of a raw series over the business cycle.

    COUNTERCYCLICAL: rises in recessions (e.g. unemployment)
    PROCYCLICAL: falls in recessions (e.g. job vacancies)
    """
    COUNTERCYCLICAL = "countercyclical"
    PROCYCLICAL = "procyclical"

    @classmethod
    def parse(cls, value: Union["Cyclicality", str]) -> "Cyclicality":
        """Parse a cyclicality flag, rejecting anything not enumerated."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ConfigurationError(
            f"cyclicality must be one of {[c.value for c in cls]}, got {value!r}"
        )


@dataclass(frozen=True)
class ParameterTuple:
    """
    How one indicator column was derived.

    Attributes
    ----------
    smoothing_method : str
        'SMA' or 'EMA'
    smoothing_parameter : float
        SMA window in months or EMA decay weight
    curving_parameter : float
        Box-Cox parameter (0 = log)
    turning_parameter : int
        Turning window in months
    mixing_method : str, optional
        'linear' or 'minmax' once mixed
    mixing_parameter : float, optional
        Mixing weight once mixed
    """
    smoothing_method: str
    smoothing_parameter: float
    curving_parameter: float
    turning_parameter: int
    mixing_method: Optional[str] = None
    mixing_parameter: Optional[float] = None

    @property
    def is_mixed(self) -> bool:
        return self.mixing_method is not None

    @classmethod
    def from_row(cls, row: pd.Series) -> "ParameterTuple":
        """Create from one row of an IndicatorFamily parameter table."""
        method = row['mixing_method']
        weight = row['mixing_parameter']
        return cls(
            smoothing_method=str(row['smoothing_method']),
            smoothing_parameter=float(row['smoothing_parameter']),
            curving_parameter=float(row['curving_parameter']),
            turning_parameter=int(row['turning_parameter']),
            mixing_method=None if pd.isna(method) else str(method),
            mixing_parameter=None if pd.isna(weight) else float(weight),
        )


class IndicatorFamily:
    """
    Indicator columns with their parameter tags.

    Parameters
    ----------
    values : np.ndarray
        Matrix [n_month x n_columns]
    parameters : pd.DataFrame
        One row per column with PARAMETER_COLUMNS; the index labels the
        logical indicator and survives column selection
    timeline : np.ndarray, optional
        Decimal-year dates, one per month
    """

    def __init__(
        self,
        values: np.ndarray,
        parameters: pd.DataFrame,
        timeline: Optional[np.ndarray] = None
    ):
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ConfigurationError(f"Indicator values must be 2-D, got shape {values.shape}")
        if values.shape[1] != len(parameters):
            raise ConfigurationError(
                f"Indicator matrix and parameter table must have the same number of columns: "
                f"{values.shape[1]} vs {len(parameters)}"
            )
        missing = [c for c in PARAMETER_COLUMNS if c not in parameters.columns]
        if missing:
            raise ConfigurationError(f"Parameter table is missing columns: {missing}")
        if timeline is not None:
            timeline = np.asarray(timeline, dtype=np.float64)
            if len(timeline) != values.shape[0]:
                raise ConfigurationError(
                    f"Timeline length {len(timeline)} does not match {values.shape[0]} months"
                )

        self.values = values
        self.parameters = parameters[PARAMETER_COLUMNS]
        self.timeline = timeline

    @property
    def n_month(self) -> int:
        return self.values.shape[0]

    @property
    def n_columns(self) -> int:
        return self.values.shape[1]

    @property
    def shape(self):
        return self.values.shape

    def __len__(self) -> int:
        return self.n_columns

    def __repr__(self) -> str:
        return f"IndicatorFamily(n_month={self.n_month}, n_columns={self.n_columns})"

    def parameter(self, i: int) -> ParameterTuple:
        """Parameter tuple of the column at position i."""
        return ParameterTuple.from_row(self.parameters.iloc[i])

    def column(self, i: int) -> np.ndarray:
        return self.values[:, i]

    def same_tags(self, other: "IndicatorFamily") -> bool:
        """True when both families carry identical parameter tables."""
        return (
            self.parameters.reset_index(drop=True)
            .equals(other.parameters.reset_index(drop=True))
        )

    def select(self, positions: Sequence[int]) -> "IndicatorFamily":
        """Subset of columns, keeping their original index labels."""
        positions = np.asarray(positions, dtype=np.int64)
        return IndicatorFamily(
            self.values[:, positions],
            self.parameters.iloc[positions],
            self.timeline,
        )

    def window(self, begin: float, end: float) -> "IndicatorFamily":
        """Rows whose dates fall within [begin, end]."""
        if self.timeline is None:
            raise ConfigurationError("IndicatorFamily has no timeline to window")
        rows = np.flatnonzero(window_mask(self.timeline, begin, end))
        if len(rows) == 0:
            return IndicatorFamily(self.values[:0], self.parameters, self.timeline[:0])
        rows = slice(rows[0], rows[-1] + 1)
        return IndicatorFamily(self.values[rows], self.parameters, self.timeline[rows])

    def expand(
        self,
        tag: str,
        grid: Sequence,
        transform: Callable[[np.ndarray, object], np.ndarray]
    ) -> "IndicatorFamily":
        """
        Cartesian expansion: apply `transform` for every grid value.

        The new family holds one block of n_columns per grid value, in grid
        order; inside a block columns keep their current order. The tag
        column is set to the grid value for every column of its block.

        Parameters
        ----------
        tag : str
            Parameter column recording the grid value
        grid : sequence
            Parameter values
        transform : callable
            (values, grid_value) -> matrix with the same shape as values

        Returns
        -------
        IndicatorFamily
            Family with len(grid) * n_columns columns and a fresh RangeIndex
        """
        if tag not in PARAMETER_COLUMNS:
            raise ConfigurationError(f"Unknown parameter tag: {tag}")
        m = self.n_columns
        out = np.empty((self.n_month, m * len(grid)))
        blocks = []
        for g, value in enumerate(grid):
            out[:, g * m:(g + 1) * m] = transform(self.values, value)
            blocks.append(self.parameters.assign(**{tag: value}))
        parameters = pd.concat(blocks, ignore_index=True)
        return IndicatorFamily(out, parameters, self.timeline)

    def to_frame(self) -> pd.DataFrame:
        """Indicator values indexed by timeline, one column per indicator label."""
        index = pd.Index(self.timeline, name="date") if self.timeline is not None else None
        return pd.DataFrame(self.values, index=index, columns=self.parameters.index)


def build_indicator(
    raw: Union[np.ndarray, pd.Series],
    cyclicality: Union[Cyclicality, str],
    timeline: Optional[np.ndarray] = None,
    grid: Optional[IndicatorGridConfig] = None
) -> IndicatorFamily:
    """
    Build the family of recession indicators derived from one raw series.

    Three nested stages applied as a Cartesian product:
    1. Smoothing: SMA windows and EMA weights
    2. Curvature: Box-Cox transform of every smoothed series
    3. Turning point: distance from the trailing minimum (countercyclical)
       or maximum (procyclical) over every turning window

    Parameters
    ----------
    raw : np.ndarray or pd.Series
        Raw monthly series (strictly positive)
    cyclicality : Cyclicality or str
        'countercyclical' (rises in recessions) or 'procyclical'
    timeline : np.ndarray, optional
        Decimal-year dates aligned with raw
    grid : IndicatorGridConfig, optional
        Parameter grids (default: 22 smoothing x 11 curving x 18 turning)

    Returns
    -------
    IndicatorFamily
        grid.n_indicators columns (4,356 by default)

    Raises
    ------
    ConfigurationError
        If cyclicality is not an enumerated value
    ValueError
        If the raw series fails validation
    """
    cyclicality = Cyclicality.parse(cyclicality)
    grid = grid or IndicatorGridConfig()
    raw = DataValidator.validate_raw_series(raw, context=f"build_indicator[{cyclicality.value}]")
    if timeline is not None:
        timeline = DataValidator.validate_timeline(timeline, context="build_indicator")

    smoothed, smoothing_tags = smooth_series(raw, grid.sma_windows, grid.ema_weights)
    parameters = pd.DataFrame({
        'smoothing_method': [method for method, _ in smoothing_tags],
        'smoothing_parameter': [parameter for _, parameter in smoothing_tags],
        'curving_parameter': np.nan,
        'turning_parameter': 0,
        'mixing_method': None,
        'mixing_parameter': np.nan,
    })
    family = IndicatorFamily(smoothed, parameters, timeline)

    family = family.expand('curving_parameter', grid.curving_parameters, curve)

    procyclical = cyclicality is Cyclicality.PROCYCLICAL
    family = family.expand(
        'turning_parameter',
        grid.turning_windows,
        lambda values, window: turning_distance(values, window, procyclical),
    )

    instrumented_logger.log_data_transform(
        "build_indicator",
        input_data=raw,
        output_data=family.values,
        metadata={
            "cyclicality": cyclicality.value,
            "n_columns": family.n_columns,
        }
    )
    return family
