"""
Signal scoring module.

Perfect classifier search, frontier selection and probability scoring.
No I/O operations - all data passed as parameters.
"""

from recession_lib.signal_mining.scorers.perfect_classifier import (
    validate_threshold_grid,
    sweep_thresholds,
    merge_sweep_results,
    select_perfect_classifier,
)

from recession_lib.signal_mining.scorers.frontier import (
    compute_error_profiles,
    frontier_positions,
    select_frontier_classifier,
    select_ensemble,
)

from recession_lib.signal_mining.scorers.probability import (
    normal_cdf_or_step,
    score_probability,
    compute_recession_probability,
)

__all__ = [
    # Perfect classifier search
    'validate_threshold_grid',
    'sweep_thresholds',
    'merge_sweep_results',
    'select_perfect_classifier',
    # Frontier
    'compute_error_profiles',
    'frontier_positions',
    'select_frontier_classifier',
    'select_ensemble',
    # Probability
    'normal_cdf_or_step',
    'score_probability',
    'compute_recession_probability',
]
