"""
Recession probability data model.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(eq=False)
class ProbabilityTrace:
    """
    Monthly recession probabilities implied by ensemble classifiers.

    Attributes
    ----------
    probability : pd.DataFrame
        One column per ensemble member, indexed by date; exactly 0 in
        expansion months
    in_recession : np.ndarray
        Bool matrix [n_month x n_members] from the state machine
    duration : np.ndarray
        Int matrix [n_month x n_members], months since detection
    """
    probability: pd.DataFrame
    in_recession: np.ndarray
    duration: np.ndarray

    @property
    def is_empty(self) -> bool:
        return self.probability.shape[1] == 0

    @property
    def aggregate(self) -> pd.Series:
        """Mean probability across members (NaN when the ensemble is empty)."""
        if self.is_empty:
            return pd.Series(np.nan, index=self.probability.index, name="aggregate")
        return self.probability.mean(axis=1).rename("aggregate")

    def to_frame(self) -> pd.DataFrame:
        """Aggregate followed by individual member probabilities."""
        return pd.concat([self.aggregate, self.probability], axis=1)
