"""
Recession pipeline runners.

Provides orchestration of the core stages:
- RawSeries -> IndicatorFamily -> PerfectClassifierSet -> Ensemble -> ProbabilityTrace
"""

from .pipeline import RecessionPipeline, PipelineResult
from .ray_sweep import RaySweep

__all__ = [
    "RecessionPipeline",
    "PipelineResult",
    "RaySweep",
]
