"""
Classifier data models.

A classifier is an (indicator column, threshold) pair. Perfect classifiers
are the pairs whose detected-event count over a training window equals the
target count exactly; they carry their detected start dates.
"""

import pickle
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Sequence, Union

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Classifier:
    """
    Threshold rule on one indicator column.

    Attributes
    ----------
    column_index : int
        Column position in the IndicatorFamily
    threshold : float
        Threshold from the search grid
    """
    column_index: int
    threshold: float


@dataclass(eq=False)
class PerfectClassifierSet:
    """
    Perfect classifiers found by the threshold sweep.

    Rows are ordered by ascending threshold, then ascending column index.
    A column may appear once per threshold at which it is perfect.

    Attributes
    ----------
    column_index : np.ndarray
        Int array [n_perfect], indicator column positions
    threshold : np.ndarray
        Float array [n_perfect], thresholds
    start_dates : np.ndarray
        Float matrix [n_perfect x target_count], detected start dates in
        chronological order
    target_count : int
        Number of true events in the training window
    begin_training : float
        First month of the training window (decimal year)
    end_training : float
        Last month of the training window (decimal year)
    """
    column_index: np.ndarray
    threshold: np.ndarray
    start_dates: np.ndarray
    target_count: int
    begin_training: float
    end_training: float

    def __post_init__(self):
        self.column_index = np.asarray(self.column_index, dtype=np.int64)
        self.threshold = np.asarray(self.threshold, dtype=np.float64)
        self.start_dates = np.asarray(self.start_dates, dtype=np.float64).reshape(-1, self.target_count)
        if not len(self.column_index) == len(self.threshold) == len(self.start_dates):
            raise ValueError(
                f"Perfect classifier arrays disagree in length: {len(self.column_index)}, "
                f"{len(self.threshold)}, {len(self.start_dates)}"
            )

    def __len__(self) -> int:
        return len(self.column_index)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def classifier(self, i: int) -> Classifier:
        return Classifier(int(self.column_index[i]), float(self.threshold[i]))

    def subset(self, positions: Sequence[int]) -> "PerfectClassifierSet":
        positions = np.asarray(positions, dtype=np.int64)
        return PerfectClassifierSet(
            column_index=self.column_index[positions],
            threshold=self.threshold[positions],
            start_dates=self.start_dates[positions],
            target_count=self.target_count,
            begin_training=self.begin_training,
            end_training=self.end_training,
        )

    def to_frame(self) -> pd.DataFrame:
        """One row per perfect classifier with its detected start dates."""
        frame = pd.DataFrame({
            'column_index': self.column_index,
            'threshold': self.threshold,
        })
        for k in range(self.target_count):
            frame[f'start_{k + 1}'] = self.start_dates[:, k]
        return frame

    def to_dict(self) -> Dict[str, Any]:
        return {
            'column_index': self.column_index,
            'threshold': self.threshold,
            'start_dates': self.start_dates,
            'target_count': self.target_count,
            'begin_training': self.begin_training,
            'end_training': self.end_training,
        }

    def save(self, filepath: Union[str, Path]):
        """Save the search snapshot so frontier selection can resume later."""
        with open(filepath, 'wb') as f:
            pickle.dump(self.to_dict(), f)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> "PerfectClassifierSet":
        """Load a snapshot written by save()."""
        with open(filepath, 'rb') as f:
            params = pickle.load(f)
        return cls(**params)

    def __repr__(self) -> str:
        return (
            f"PerfectClassifierSet(n={len(self)}, target_count={self.target_count}, "
            f"training={self.begin_training}-{self.end_training})"
        )
