"""
Signal mining data models.

Classifier sets, error profiles, frontier and ensemble results and
probability traces.
"""

from recession_lib.signal_mining.models.classifier import (
    Classifier,
    PerfectClassifierSet,
)
from recession_lib.signal_mining.models.scoring_result import (
    ERROR_COLUMNS,
    ErrorProfile,
    FrontierResult,
    Ensemble,
)
from recession_lib.signal_mining.models.probability_trace import ProbabilityTrace

__all__ = [
    'Classifier',
    'PerfectClassifierSet',
    'ERROR_COLUMNS',
    'ErrorProfile',
    'FrontierResult',
    'Ensemble',
    'ProbabilityTrace',
]
