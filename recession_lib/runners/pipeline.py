"""
Recession classifier pipeline.

Chains the core stages with explicit inputs:
raw series -> indicator families -> mixed family -> perfect classifiers ->
frontier -> ensemble -> probabilities

Loading raw series and event dates is left to the caller (see
recession_lib.interfaces for the source protocols).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import numpy as np
import pandas as pd

from recession_lib.config_schemas import ConfigurationError, EngineConfig
from recession_lib.indicators.family import Cyclicality, IndicatorFamily, build_indicator
from recession_lib.indicators.mixing import mix_indicator
from recession_lib.interfaces.events import TrueEvents
from recession_lib.logging_config import configure_structlog, get_logger
from recession_lib.signal_mining.models.classifier import PerfectClassifierSet
from recession_lib.signal_mining.models.probability_trace import ProbabilityTrace
from recession_lib.signal_mining.models.scoring_result import Ensemble, FrontierResult
from recession_lib.signal_mining.scorers.frontier import select_ensemble, select_frontier_classifier
from recession_lib.signal_mining.scorers.perfect_classifier import select_perfect_classifier
from recession_lib.signal_mining.scorers.probability import compute_recession_probability

logger = get_logger(__name__)

Series = Union[np.ndarray, pd.Series]


@dataclass(eq=False)
class PipelineResult:
    """
    Outputs of one training run.

    Attributes
    ----------
    events : TrueEvents
        Events inside the training window (their count is the target count)
    perfect : PerfectClassifierSet
        Classifiers reproducing the target count
    frontier : FrontierResult
        Anticipation-precision frontier
    ensemble : Ensemble
        High-precision subset of the frontier
    probability : ProbabilityTrace
        Full-sample monthly probabilities
    """
    events: TrueEvents
    perfect: PerfectClassifierSet
    frontier: FrontierResult
    ensemble: Ensemble
    probability: ProbabilityTrace

    @property
    def is_empty(self) -> bool:
        return self.ensemble.is_empty

    def summary(self) -> Dict[str, Any]:
        return {
            'events': self.events.label,
            'target_count': self.perfect.target_count,
            'begin_training': self.perfect.begin_training,
            'end_training': self.perfect.end_training,
            'n_perfect': len(self.perfect),
            'n_frontier': len(self.frontier),
            'n_ensemble': len(self.ensemble),
        }


class RecessionPipeline:
    """
    End-to-end recession classifier engine.

    Example:
    --------
    >>> pipeline = RecessionPipeline(EngineConfig.from_yaml("engine.yaml"))
    >>> family = pipeline.build_family(unemployment, vacancy, timeline)
    >>> result = pipeline.train(family, recessions, 1930.0, 2021.92)
    >>> result.probability.aggregate.tail()
    """

    def __init__(self, config: Optional[EngineConfig] = None, configure_logging: bool = False):
        """
        Initialize the pipeline.

        Args:
            config: Engine configuration (defaults for every section if None)
            configure_logging: Configure structlog from config.logging
        """
        self.config = config or EngineConfig()
        if configure_logging:
            configure_structlog(self.config.logging.level, self.config.logging.file)

    def build_family(self, unemployment: Series, vacancy: Series, timeline: np.ndarray) -> IndicatorFamily:
        """
        Mixed indicator family from unemployment and vacancy rates.

        Unemployment rises in recessions (countercyclical); vacancies fall
        (procyclical).
        """
        grid = self.config.indicators
        unemployment_family = build_indicator(unemployment, Cyclicality.COUNTERCYCLICAL, timeline, grid)
        vacancy_family = build_indicator(vacancy, Cyclicality.PROCYCLICAL, timeline, grid)
        return mix_indicator(unemployment_family, vacancy_family, grid.mixing_weights)

    def train(
        self,
        family: IndicatorFamily,
        events: TrueEvents,
        begin_training: float,
        end_training: float
    ) -> PipelineResult:
        """
        Search, select and score over one training window.

        Args:
            family: Full-sample indicator family (with timeline)
            events: True events; only those starting within the window count
            begin_training: First month of the training window
            end_training: Last month of the training window

        Returns:
            PipelineResult; probabilities cover the full family timeline
        """
        training_events = events.within(begin_training, end_training)
        if training_events.count == 0:
            raise ConfigurationError(
                f"No '{events.label}' event starts within {begin_training}-{end_training}"
            )

        logger.info(
            "pipeline_train",
            events=events.label,
            target_count=training_events.count,
            begin_training=begin_training,
            end_training=end_training,
        )
        perfect = select_perfect_classifier(
            family,
            begin_training,
            end_training,
            training_events.count,
            thresholds=self.config.thresholds.grid(),
            config=self.config.search,
        )
        return self._score(family, perfect, training_events)

    def rescore(
        self,
        family: IndicatorFamily,
        perfect: PerfectClassifierSet,
        events: TrueEvents
    ) -> PipelineResult:
        """
        Rerun frontier, ensemble and probabilities for another event set.

        The perfect classifiers are reused as they are (e.g. loaded from a
        snapshot); `events` must have as many events as their target count.
        """
        logger.info("pipeline_rescore", events=events.label, n_perfect=len(perfect))
        return self._score(family, perfect, events)

    def backtest(
        self,
        family: IndicatorFamily,
        events: TrueEvents,
        begin_training: float,
        end_training: float
    ) -> PipelineResult:
        """
        Train on a window ending before the sample end.

        Probabilities after `end_training` are out of sample.
        """
        if family.timeline is None:
            raise ConfigurationError("Backtests need an indicator family with a timeline")
        if end_training >= family.timeline[-1]:
            raise ConfigurationError(
                f"Backtest training must end before the sample end {family.timeline[-1]}, got {end_training}"
            )
        logger.info("pipeline_backtest", end_training=end_training, sample_end=float(family.timeline[-1]))
        return self.train(family, events, begin_training, end_training)

    def _score(
        self,
        family: IndicatorFamily,
        perfect: PerfectClassifierSet,
        events: TrueEvents
    ) -> PipelineResult:
        frontier = select_frontier_classifier(perfect, events)
        ensemble = select_ensemble(frontier, self.config.ensemble.std_error_max, family)
        probability = compute_recession_probability(family, ensemble)
        result = PipelineResult(
            events=events,
            perfect=perfect,
            frontier=frontier,
            ensemble=ensemble,
            probability=probability,
        )
        logger.info("pipeline_complete", **result.summary())
        return result
