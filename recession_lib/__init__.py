"""
Recession Classifier Engine

Searches a large combinatorial family of transformations of labor-market
series for threshold rules that would have flagged past recessions in real
time, selects the anticipation-precision frontier of those rules and turns
a high-precision ensemble into monthly recession probabilities.

Package Structure:
- indicators/: Indicator families (smoothing, curvature, turning points, mixing)
- signal_mining/: Event state machine, classifier search, frontier, probabilities
- runners/: Parallel threshold sweep and the end-to-end pipeline
- interfaces/: True event dates and source protocols
- utils/: Decimal-year timeline helpers
"""

__version__ = '0.1.0'
