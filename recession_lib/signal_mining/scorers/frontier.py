"""
Anticipation-precision frontier selection.

Pure functions - no I/O operations.

Functions:
- compute_error_profiles: Timing-error moments of perfect classifiers
- select_frontier_classifier: Non-dominated classifiers (precision vs anticipation)
- select_ensemble: High-precision subset of the frontier
"""

from typing import Optional

import numpy as np
import pandas as pd

from recession_lib.config_schemas import ConfigurationError
from recession_lib.constants import MONTHS_PER_YEAR, STD_ERROR_MAX
from recession_lib.indicators.family import IndicatorFamily
from recession_lib.interfaces.events import TrueEvents
from recession_lib.logging_config import InstrumentedLogger
from recession_lib.signal_mining.models.classifier import PerfectClassifierSet
from recession_lib.signal_mining.models.scoring_result import (
    ERROR_COLUMNS,
    Ensemble,
    FrontierResult,
)

instrumented_logger = InstrumentedLogger(__name__)


def compute_error_profiles(start_dates: np.ndarray, true_starts: np.ndarray) -> pd.DataFrame:
    """
    Timing errors of detected start dates against true start dates.

    The i-th detected date of a classifier is paired with the i-th true
    date. Errors are (detected - true) * 12, rounded to whole months
    since dates carry two decimals on a monthly grid.

    Args:
        start_dates: Matrix [n_classifier x n_event] of detected dates
        true_starts: Vector [n_event] of true start dates

    Returns:
        DataFrame with ERROR_COLUMNS, one row per classifier

    Raises:
        ConfigurationError: If the event counts differ
    """
    start_dates = np.asarray(start_dates, dtype=np.float64)
    true_starts = np.asarray(true_starts, dtype=np.float64)
    if start_dates.ndim != 2 or start_dates.shape[1] != len(true_starts):
        raise ConfigurationError(
            f"Detected dates {start_dates.shape} cannot be paired with {len(true_starts)} true events"
        )

    if start_dates.shape[0] == 0:
        return pd.DataFrame({name: np.empty(0) for name in ERROR_COLUMNS})

    error_mat = np.round((start_dates - true_starts[np.newaxis, :]) * MONTHS_PER_YEAR)

    return pd.DataFrame({
        'std_error': error_mat.std(axis=1, ddof=0),
        'mean_error': error_mat.mean(axis=1),
        'min_error': error_mat.min(axis=1),
        'max_error': error_mat.max(axis=1),
    })


def frontier_positions(std_error: np.ndarray, mean_error: np.ndarray) -> np.ndarray:
    """
    Staircase of strictly improving mean error as standard error grows.

    Classifiers are sorted by standard error, ties broken by position; the
    most precise one is always retained, and each later one is retained only
    if its mean error is strictly below every mean error before it.

    Args:
        std_error: Standard errors [n]
        mean_error: Mean errors [n]

    Returns:
        Positions of frontier members, ordered by increasing standard error
    """
    n = len(std_error)
    if n == 0:
        return np.empty(0, dtype=np.int64)

    order = np.lexsort((np.arange(n), std_error))
    mean_sorted = mean_error[order]

    # Best mean among all previously sorted classifiers
    best_before = np.empty(n)
    best_before[0] = np.inf
    best_before[1:] = np.minimum.accumulate(mean_sorted)[:-1]

    return order[mean_sorted < best_before].astype(np.int64)


def select_frontier_classifier(
    perfect: PerfectClassifierSet,
    events: TrueEvents
) -> FrontierResult:
    """
    Identify perfect classifiers on the anticipation-precision frontier.

    Args:
        perfect: Result of the perfect classifier search
        events: True events to measure timing errors against; any event set
            with the same count works (e.g. placebo events)

    Returns:
        FrontierResult (empty when `perfect` is empty)

    Raises:
        ConfigurationError: If the event count differs from the target count
    """
    if events.count != perfect.target_count:
        raise ConfigurationError(
            f"Event set '{events.label}' has {events.count} events; "
            f"classifiers were selected for {perfect.target_count}"
        )

    errors = compute_error_profiles(perfect.start_dates, events.starts)
    frontier_index = frontier_positions(
        errors['std_error'].to_numpy(), errors['mean_error'].to_numpy()
    )

    if perfect.is_empty:
        instrumented_logger.log_quality_warning(
            "select_frontier_classifier",
            "no perfect classifiers; frontier is empty",
            {"events": events.label, "target_count": perfect.target_count},
        )
    else:
        instrumented_logger.logger.info(
            "frontier_selected",
            events=events.label,
            n_perfect=len(perfect),
            n_frontier=len(frontier_index),
        )

    return FrontierResult(
        perfect=perfect,
        errors=errors,
        frontier_index=frontier_index,
        events_label=events.label,
    )


def select_ensemble(
    frontier: FrontierResult,
    std_error_max: float = STD_ERROR_MAX,
    family: Optional[IndicatorFamily] = None
) -> Ensemble:
    """
    Frontier classifiers with standard error strictly below a ceiling.

    Args:
        frontier: Frontier selection result
        std_error_max: Maximum standard error in months (default 3)
        family: Indicator family the classifiers index into; when given,
            member parameter tags are attached

    Returns:
        Ensemble (possibly empty), in frontier order
    """
    if std_error_max <= 0:
        raise ConfigurationError(f"std_error_max must be positive, got {std_error_max}")

    frontier_errors = frontier.frontier_errors
    keep = frontier_errors['std_error'].to_numpy() < std_error_max
    perfect_index = frontier.frontier_index[keep]
    column_index = frontier.perfect.column_index[perfect_index]

    parameters = None
    if family is not None:
        parameters = family.parameters.iloc[column_index]

    ensemble = Ensemble(
        perfect_index=perfect_index,
        column_index=column_index,
        threshold=frontier.perfect.threshold[perfect_index],
        errors=frontier.errors.iloc[perfect_index].reset_index(drop=True),
        std_error_max=std_error_max,
        parameters=parameters,
        metadata={"events": frontier.events_label},
    )

    if ensemble.is_empty:
        instrumented_logger.log_quality_warning(
            "select_ensemble",
            "no frontier classifier meets the precision ceiling",
            {"std_error_max": std_error_max, "n_frontier": len(frontier)},
        )
    else:
        instrumented_logger.logger.info("ensemble_selected", n_ensemble=len(ensemble), std_error_max=std_error_max)
    return ensemble
