"""
Signal Mining

Finds threshold classifiers that reproduce historical recessions and
scores them.

Key components:
- state: Expansion/recession state machine with recession duration
- models: Classifier sets, error profiles, frontier, ensemble, probabilities
- scorers: Perfect classifier search, frontier selection, probability scoring
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
from recession_lib.signal_mining.state.event_machine import (
    EventTrace,
    detect_events,
    count_events,
)
from recession_lib.signal_mining.scorers.perfect_classifier import select_perfect_classifier
from recession_lib.signal_mining.scorers.frontier import (
    select_frontier_classifier,
    select_ensemble,
)
from recession_lib.signal_mining.scorers.probability import compute_recession_probability

__all__ = [
    # Classifier types
    'Classifier',
    'PerfectClassifierSet',
    # Scoring types
    'ERROR_COLUMNS',
    'ErrorProfile',
    'FrontierResult',
    'Ensemble',
    'ProbabilityTrace',
    # State machine
    'EventTrace',
    'detect_events',
    'count_events',
    # Stages
    'select_perfect_classifier',
    'select_frontier_classifier',
    'select_ensemble',
    'compute_recession_probability',
]
