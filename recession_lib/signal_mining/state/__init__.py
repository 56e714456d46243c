"""
State layer for signal mining.

Expansion/recession state machine shared by the classifier search and the
probability scorer.
"""

from recession_lib.signal_mining.state.event_machine import (
    EventTrace,
    detect_events,
    count_events,
)

__all__ = [
    'EventTrace',
    'detect_events',
    'count_events',
]
