"""
Ray-based distributed threshold sweep.

Splits the threshold grid into chunks and evaluates each chunk as a Ray task
against a single shared copy of the training-window indicator matrix.

Example:
--------
>>> import ray
>>> ray.init(address="auto")
>>>
>>> sweep = RaySweep(n_chunks=64)
>>> column_index, threshold, start_rows = sweep.run(values, thresholds, target_count=5)
"""

import time
from typing import List

import numpy as np
import ray

from recession_lib.logging_config import get_logger
from recession_lib.signal_mining.scorers.perfect_classifier import (
    SweepResult,
    merge_sweep_results,
    sweep_thresholds,
)

logger = get_logger(__name__)


@ray.remote
def sweep_chunk_task(values: np.ndarray, thresholds: np.ndarray, target_count: int) -> SweepResult:
    """Ray remote task evaluating one threshold chunk."""
    return sweep_thresholds(values, thresholds, target_count)


class RaySweep:
    """
    Distributed perfect-classifier sweep.

    Results come back in completion order and are merged with a
    deterministic (threshold, column index) sort, so the output matches the
    serial sweep exactly.
    """

    def __init__(self, n_chunks: int = 16):
        """
        Initialize the sweep.

        Args:
            n_chunks: Number of threshold chunks submitted as tasks
        """
        if n_chunks < 1:
            raise ValueError(f"n_chunks must be >= 1, got {n_chunks}")
        self.n_chunks = n_chunks

    def run(self, values: np.ndarray, thresholds: np.ndarray, target_count: int) -> SweepResult:
        """
        Run the sweep on the Ray cluster.

        Args:
            values: Training-window indicator matrix [n_month x n_columns]
            thresholds: Full threshold grid
            target_count: Exact number of events required

        Returns:
            Merged SweepResult, ordered by threshold then column index
        """
        if not ray.is_initialized():
            logger.warning("ray_not_initialized", action="starting local cluster")
            ray.init()

        chunks = [c for c in np.array_split(np.asarray(thresholds), self.n_chunks) if len(c) > 0]
        logger.info(
            "ray_sweep_start",
            n_chunks=len(chunks),
            n_thresholds=len(thresholds),
            cluster_resources=ray.cluster_resources(),
        )
        start_time = time.time()

        values_ref = ray.put(np.ascontiguousarray(values))
        futures = [sweep_chunk_task.remote(values_ref, chunk, target_count) for chunk in chunks]

        parts: List[SweepResult] = []
        while futures:
            done, futures = ray.wait(futures, num_returns=1, timeout=60.0)
            for future in done:
                parts.append(ray.get(future))
                logger.debug("ray_sweep_progress", completed=len(parts), total=len(chunks))

        logger.info(
            "ray_sweep_complete",
            n_chunks=len(chunks),
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return merge_sweep_results(parts, target_count)
