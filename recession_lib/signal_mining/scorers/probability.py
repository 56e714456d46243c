"""
Recession probability scoring.

Ensemble classifiers are re-run over the full sample. A month in recession
with duration d gets probability Phi(d - 1; -mean_error, std_error), the
normal CDF under the classifier's own timing-error distribution; months in
expansion get exactly 0.
"""

import numpy as np
import pandas as pd
from scipy import stats

from recession_lib.config_schemas import ConfigurationError
from recession_lib.indicators.family import IndicatorFamily
from recession_lib.logging_config import InstrumentedLogger
from recession_lib.signal_mining.models.probability_trace import ProbabilityTrace
from recession_lib.signal_mining.models.scoring_result import Ensemble
from recession_lib.signal_mining.state.event_machine import detect_events

instrumented_logger = InstrumentedLogger(__name__)


def normal_cdf_or_step(x: np.ndarray, loc: np.ndarray, scale: np.ndarray) -> np.ndarray:
    """
    Normal CDF, with a Heaviside step at `loc` where `scale` is zero.

    Arrays broadcast against each other.
    """
    x, loc, scale = np.broadcast_arrays(
        np.asarray(x, dtype=np.float64),
        np.asarray(loc, dtype=np.float64),
        np.asarray(scale, dtype=np.float64),
    )
    degenerate = scale <= 0
    safe_scale = np.where(degenerate, 1.0, scale)
    cdf = stats.norm.cdf(x, loc=loc, scale=safe_scale)
    return np.where(degenerate, (x >= loc).astype(np.float64), cdf)


def score_probability(
    values: np.ndarray,
    thresholds: np.ndarray,
    mean_error: np.ndarray,
    std_error: np.ndarray
) -> ProbabilityTrace:
    """
    Probabilities for indicator columns paired with thresholds and errors.

    Args:
        values: Indicator matrix [n_month x n_members], full sample
        thresholds: Threshold per member
        mean_error: Mean timing error per member (months)
        std_error: Standard timing error per member (months)

    Returns:
        ProbabilityTrace with a RangeIndex
    """
    values = np.asarray(values, dtype=np.float64)
    thresholds = np.asarray(thresholds, dtype=np.float64)
    mean_error = np.asarray(mean_error, dtype=np.float64)
    std_error = np.asarray(std_error, dtype=np.float64)
    m = values.shape[1]
    if not len(thresholds) == len(mean_error) == len(std_error) == m:
        raise ConfigurationError(
            f"Members disagree in length: {m} columns, {len(thresholds)} thresholds, "
            f"{len(mean_error)}/{len(std_error)} error moments"
        )

    trace = detect_events(values, thresholds)
    cdf = normal_cdf_or_step(
        trace.duration - 1,
        -mean_error[np.newaxis, :],
        std_error[np.newaxis, :],
    )
    probability = np.where(trace.in_recession, cdf, 0.0)

    return ProbabilityTrace(
        probability=pd.DataFrame(probability),
        in_recession=trace.in_recession,
        duration=trace.duration,
    )


def compute_recession_probability(
    family: IndicatorFamily,
    ensemble: Ensemble
) -> ProbabilityTrace:
    """
    Monthly recession probabilities for every ensemble member.

    Parameters
    ----------
    family : IndicatorFamily
        Full-sample indicator family the ensemble columns index into
    ensemble : Ensemble
        Selected classifiers with their error profiles

    Returns
    -------
    ProbabilityTrace
        Columns labelled by member, indexed by the family timeline; an
        empty ensemble yields zero columns and a NaN aggregate
    """
    index = pd.Index(family.timeline, name="date") if family.timeline is not None else None

    if ensemble.is_empty:
        instrumented_logger.log_quality_warning(
            "compute_recession_probability",
            "empty ensemble; aggregate probability is undefined",
            {"n_month": family.n_month},
        )
        shape = (family.n_month, 0)
        return ProbabilityTrace(
            probability=pd.DataFrame(index=index if index is not None else range(family.n_month)),
            in_recession=np.zeros(shape, dtype=bool),
            duration=np.zeros(shape, dtype=np.int64),
        )

    if ensemble.column_index.max() >= family.n_columns:
        raise ConfigurationError(
            f"Ensemble references column {int(ensemble.column_index.max())}; "
            f"family has {family.n_columns} columns"
        )

    members = family.values[:, ensemble.column_index]
    trace = score_probability(
        members,
        ensemble.threshold,
        ensemble.errors['mean_error'].to_numpy(),
        ensemble.errors['std_error'].to_numpy(),
    )
    trace.probability.columns = ensemble.labels
    if index is not None:
        trace.probability.index = index

    instrumented_logger.log_data_transform(
        "compute_recession_probability",
        input_data=members,
        output_data=trace.probability,
        metadata={"n_members": len(ensemble), "n_month": family.n_month},
    )
    return trace
