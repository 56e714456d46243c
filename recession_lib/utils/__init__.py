"""Date helpers shared by the engine."""

from .timeline import decimal_year, make_timeline, window_mask

__all__ = ['decimal_year', 'make_timeline', 'window_mask']
