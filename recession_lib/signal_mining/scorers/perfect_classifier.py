"""
Perfect classifier search.

Sweeps a fine threshold grid against every indicator column over a
training window and keeps each (column, threshold) pair whose detected
event count equals the target count exactly.

Threshold iterations are independent: the grid is split into chunks that
can run serially or as parallel tasks, and the merged result is sorted by
(threshold, column index) so it does not depend on scheduling.
"""

import time
from typing import List, Optional, Tuple

import numpy as np

from recession_lib.config_schemas import ConfigurationError, SearchConfig
from recession_lib.constants import default_threshold_grid
from recession_lib.indicators.family import IndicatorFamily
from recession_lib.logging_config import InstrumentedLogger
from recession_lib.signal_mining.models.classifier import PerfectClassifierSet
from recession_lib.signal_mining.state.event_machine import count_events

instrumented_logger = InstrumentedLogger(__name__)

SweepResult = Tuple[np.ndarray, np.ndarray, np.ndarray]


def validate_threshold_grid(thresholds: np.ndarray) -> np.ndarray:
    """
    Check a threshold grid before the sweep starts.

    Raises:
        ConfigurationError: If the grid is empty, not 1-D, not finite or not
            strictly increasing
    """
    thresholds = np.asarray(thresholds, dtype=np.float64)
    if thresholds.ndim != 1 or len(thresholds) == 0:
        raise ConfigurationError(f"Threshold grid must be a non-empty vector, got shape {thresholds.shape}")
    if not np.isfinite(thresholds).all():
        raise ConfigurationError("Threshold grid contains non-finite values")
    if len(thresholds) > 1 and not (np.diff(thresholds) > 0).all():
        raise ConfigurationError("Threshold grid must be strictly increasing")
    return thresholds


def sweep_thresholds(
    values: np.ndarray,
    thresholds: np.ndarray,
    target_count: int
) -> SweepResult:
    """
    Find perfect classifiers for a chunk of thresholds.

    Args:
        values: Training-window indicator matrix [n_month x n_columns]
        thresholds: Thresholds to evaluate, ascending
        target_count: Exact number of events required

    Returns:
        Tuple of (column_index, threshold, start_rows [n x target_count]),
        ordered by threshold then column index. start_rows are month
        positions within `values`.
    """
    columns = []
    levels = []
    rows = []

    for threshold in thresholds:
        counts, start_rows = count_events(values, threshold, target_count)
        hits = np.flatnonzero(counts == target_count)
        if len(hits) == 0:
            continue
        columns.append(hits)
        levels.append(np.full(len(hits), threshold))
        rows.append(start_rows[hits])

    if not columns:
        return merge_sweep_results([], target_count)
    return np.concatenate(columns), np.concatenate(levels), np.concatenate(rows)


def merge_sweep_results(parts: List[SweepResult], target_count: int) -> SweepResult:
    """
    Concatenate chunk results and sort by (threshold, column index).

    Args:
        parts: Results of sweep_thresholds, in any order
        target_count: Number of start rows per classifier

    Returns:
        Single deterministically ordered SweepResult
    """
    parts = [p for p in parts if len(p[0]) > 0]
    if not parts:
        return (
            np.empty(0, dtype=np.int64),
            np.empty(0, dtype=np.float64),
            np.empty((0, target_count), dtype=np.int64),
        )

    column_index = np.concatenate([p[0] for p in parts]).astype(np.int64)
    threshold = np.concatenate([p[1] for p in parts]).astype(np.float64)
    start_rows = np.concatenate([p[2] for p in parts]).astype(np.int64)

    order = np.lexsort((column_index, threshold))
    return column_index[order], threshold[order], start_rows[order]


def select_perfect_classifier(
    family: IndicatorFamily,
    begin_training: float,
    end_training: float,
    target_count: int,
    thresholds: Optional[np.ndarray] = None,
    config: Optional[SearchConfig] = None
) -> PerfectClassifierSet:
    """
    Identify classifiers that detect exactly `target_count` events.

    Parameters
    ----------
    family : IndicatorFamily
        Full indicator family with a timeline
    begin_training : float
        First month of the training window (decimal year)
    end_training : float
        Last month of the training window (decimal year)
    target_count : int
        Number of true events in the training window
    thresholds : np.ndarray, optional
        Threshold grid (default 0.0001-0.5 in steps of 0.0001)
    config : SearchConfig, optional
        Executor settings (default: serial, 16 chunks)

    Returns
    -------
    PerfectClassifierSet
        Possibly empty; ordered by threshold then column index

    Raises
    ------
    ConfigurationError
        On an invalid target count, threshold grid or training window
    """
    config = config or SearchConfig()
    thresholds = validate_threshold_grid(
        default_threshold_grid() if thresholds is None else thresholds
    )
    if int(target_count) != target_count or target_count < 1:
        raise ConfigurationError(f"target_count must be a positive integer, got {target_count}")
    target_count = int(target_count)

    training = family.window(begin_training, end_training)
    if training.n_month < 2:
        raise ConfigurationError(
            f"Training window {begin_training}-{end_training} holds {training.n_month} months; need at least 2"
        )

    logger = instrumented_logger.logger
    logger.info(
        "perfect_search_start",
        n_thresholds=len(thresholds),
        n_columns=training.n_columns,
        n_month=training.n_month,
        target_count=target_count,
        backend=config.backend,
    )
    start = time.time()

    n_chunks = min(config.n_chunks, len(thresholds))
    chunks = np.array_split(thresholds, n_chunks)

    if config.backend == 'ray':
        from recession_lib.runners.ray_sweep import RaySweep
        column_index, threshold, start_rows = RaySweep(n_chunks=n_chunks).run(
            training.values, thresholds, target_count
        )
    else:
        parts = []
        for i, chunk in enumerate(chunks):
            parts.append(sweep_thresholds(training.values, chunk, target_count))
            logger.debug("perfect_search_progress", chunk=i + 1, n_chunks=n_chunks,
                         found=sum(len(p[0]) for p in parts))
        column_index, threshold, start_rows = merge_sweep_results(parts, target_count)

    perfect = PerfectClassifierSet(
        column_index=column_index,
        threshold=threshold,
        start_dates=training.timeline[start_rows],
        target_count=target_count,
        begin_training=begin_training,
        end_training=end_training,
    )

    logger.info(
        "perfect_search_complete",
        n_perfect=len(perfect),
        n_distinct_columns=int(len(np.unique(perfect.column_index))),
        elapsed_seconds=round(time.time() - start, 2),
    )
    if perfect.is_empty:
        instrumented_logger.log_quality_warning(
            "select_perfect_classifier",
            "no classifier reproduces the target event count",
            {"target_count": target_count, "begin_training": begin_training, "end_training": end_training},
        )
    return perfect
