"""
Scoring result data models.

Timing-error profiles of perfect classifiers, the anticipation-precision
frontier and the high-precision ensemble drawn from it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from recession_lib.signal_mining.models.classifier import PerfectClassifierSet

ERROR_COLUMNS = ['std_error', 'mean_error', 'min_error', 'max_error']


@dataclass(frozen=True)
class ErrorProfile:
    """
    Timing errors of one classifier against the true events, in months.

    Errors are detected minus true start dates; negative values mean the
    classifier fired before the true start.

    Attributes
    ----------
    std_error : float
        Population standard deviation (precision, lower is better)
    mean_error : float
        Mean error (anticipation)
    min_error : float
        Earliest detection relative to the true start
    max_error : float
        Latest detection relative to the true start
    """
    std_error: float
    mean_error: float
    min_error: float
    max_error: float

    @classmethod
    def from_row(cls, row: pd.Series) -> "ErrorProfile":
        return cls(**{name: float(row[name]) for name in ERROR_COLUMNS})

    def to_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in ERROR_COLUMNS}


@dataclass(eq=False)
class FrontierResult:
    """
    Anticipation-precision frontier over a set of perfect classifiers.

    Attributes
    ----------
    perfect : PerfectClassifierSet
        Classifiers the frontier was built from
    errors : pd.DataFrame
        ERROR_COLUMNS for every perfect classifier (row i = perfect[i])
    frontier_index : np.ndarray
        Positions into `perfect`, ordered by increasing standard error
    events_label : str
        Name of the true event set the errors were measured against
    """
    perfect: PerfectClassifierSet
    errors: pd.DataFrame
    frontier_index: np.ndarray
    events_label: str = "events"

    def __len__(self) -> int:
        return len(self.frontier_index)

    @property
    def is_empty(self) -> bool:
        return len(self.frontier_index) == 0

    @property
    def frontier_errors(self) -> pd.DataFrame:
        """Error profiles of the frontier members, in frontier order."""
        return self.errors.iloc[self.frontier_index]

    def profile(self, position: int) -> ErrorProfile:
        """Error profile of the perfect classifier at `position`."""
        return ErrorProfile.from_row(self.errors.iloc[position])


@dataclass(eq=False)
class Ensemble:
    """
    High-precision subset of the frontier used for probability scoring.

    Attributes
    ----------
    perfect_index : np.ndarray
        Positions into the PerfectClassifierSet
    column_index : np.ndarray
        Indicator column positions
    threshold : np.ndarray
        Classifier thresholds
    errors : pd.DataFrame
        ERROR_COLUMNS per member, in ensemble order
    std_error_max : float
        Precision ceiling used for selection (months)
    parameters : pd.DataFrame, optional
        Indicator parameter tags per member
    """
    perfect_index: np.ndarray
    column_index: np.ndarray
    threshold: np.ndarray
    errors: pd.DataFrame
    std_error_max: float
    parameters: Optional[pd.DataFrame] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.column_index)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def labels(self):
        """Member labels used as probability column names."""
        return [f"{int(c)}@{t:.4f}" for c, t in zip(self.column_index, self.threshold)]

    def profile(self, i: int) -> ErrorProfile:
        return ErrorProfile.from_row(self.errors.iloc[i])

    def to_frame(self) -> pd.DataFrame:
        """
        Tabulate members: parameters, threshold and error moments.

        Returns
        -------
        pd.DataFrame
            One row per ensemble member
        """
        frame = pd.DataFrame({
            'column_index': self.column_index,
            'threshold': self.threshold,
        })
        if self.parameters is not None:
            frame = pd.concat([frame, self.parameters.reset_index(drop=True)], axis=1)
        errors = self.errors.reset_index(drop=True)
        return pd.concat([frame, errors[ERROR_COLUMNS]], axis=1)

    def __repr__(self) -> str:
        return f"Ensemble(n={len(self)}, std_error_max={self.std_error_max})"
