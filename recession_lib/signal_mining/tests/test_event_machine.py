"""
Tests for the expansion/recession state machine.
Hand-computed toy crossings and replay determinism.
"""

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st
from hypothesis.extra import numpy as hnp

from recession_lib.signal_mining.state import count_events, detect_events

# Two recessions at threshold 0.25: entered at months 2 and 6, left at 4 and 8
TOY = np.array([0.0, 0.1, 0.3, 0.2, 0.0, 0.05, 0.4, 0.4, 0.0])


class TestDetectEvents:
    """Monthly states, event flags and durations."""

    def test_toy_crossings(self):
        trace = detect_events(TOY, 0.25)

        np.testing.assert_array_equal(
            trace.in_recession[:, 0],
            [False, False, True, True, False, False, True, True, False],
        )
        np.testing.assert_array_equal(trace.start_rows(0), [2, 6])
        np.testing.assert_array_equal(trace.duration[:, 0], [0, 0, 1, 2, 0, 0, 1, 2, 0])
        assert trace.n_events[0] == 2

    def test_starts_in_expansion(self):
        # Above the threshold from the first month: no upward crossing
        trace = detect_events(np.array([0.5, 0.5, 0.5]), 0.25)

        assert not trace.in_recession.any()
        assert trace.n_events[0] == 0

    def test_crossing_requires_strictly_below_before(self):
        trace = detect_events(np.array([0.0, 0.25, 0.3, 0.0]), 0.25)
        np.testing.assert_array_equal(trace.start_rows(0), [1])

        trace = detect_events(np.array([0.25, 0.3, 0.0]), 0.25)
        assert trace.n_events[0] == 0

    def test_only_exact_zero_ends_recession(self):
        values = np.array([0.0, 0.3, 1e-12, 0.3, 0.0, 0.3])
        trace = detect_events(values, 0.25)

        # 1e-12 keeps the recession alive, so month 3 is not a new event
        np.testing.assert_array_equal(trace.start_rows(0), [1, 5])
        np.testing.assert_array_equal(trace.duration[:, 0], [0, 1, 2, 3, 0, 1])

    def test_threshold_per_column(self):
        values = np.column_stack([TOY, TOY])
        trace = detect_events(values, np.array([0.25, 0.35]))

        np.testing.assert_array_equal(trace.start_rows(0), [2, 6])
        np.testing.assert_array_equal(trace.start_rows(1), [6])

    def test_rejects_three_dimensional_input(self):
        with pytest.raises(ValueError):
            detect_events(np.zeros((2, 2, 2)), 0.1)


class TestCountEvents:
    """Single-threshold event counts used by the classifier search."""

    def test_toy_counts(self):
        values = np.column_stack([TOY, np.zeros(len(TOY)), TOY[::-1]])
        counts, start_rows = count_events(values, 0.25, 2)

        np.testing.assert_array_equal(counts, [2, 0, 2])
        np.testing.assert_array_equal(start_rows[0], [2, 6])
        np.testing.assert_array_equal(start_rows[1], [-1, -1])

    def test_counts_beyond_recorded_events(self):
        values = np.tile([0.0, 0.3], 5).reshape(-1, 1)
        counts, start_rows = count_events(values, 0.25, 2)

        assert counts[0] == 5
        np.testing.assert_array_equal(start_rows[0], [1, 3])

    @given(
        values=hnp.arrays(
            np.float64,
            st.tuples(st.integers(2, 40), st.integers(1, 6)),
            elements=st.sampled_from([0.0, 0.05, 0.1, 0.2, 0.3, 0.5]),
        ),
        threshold=st.sampled_from([0.05, 0.1, 0.15, 0.3]),
    )
    @settings(max_examples=100, deadline=None)
    def test_matches_full_trace(self, values, threshold):
        trace = detect_events(values, threshold)
        counts, start_rows = count_events(values, threshold, 3)

        np.testing.assert_array_equal(counts, trace.n_events)
        for j in range(values.shape[1]):
            expected = trace.start_rows(j)[:3]
            np.testing.assert_array_equal(start_rows[j, :len(expected)], expected)

    @given(
        values=hnp.arrays(
            np.float64,
            st.tuples(st.integers(2, 40), st.integers(1, 4)),
            elements=st.floats(min_value=0.0, max_value=0.5),
        ),
        threshold=st.floats(min_value=0.0001, max_value=0.5),
    )
    @settings(max_examples=50, deadline=None)
    def test_replay_is_deterministic(self, values, threshold):
        first = detect_events(values, threshold)
        second = detect_events(values.copy(), threshold)

        np.testing.assert_array_equal(first.in_recession, second.in_recession)
        np.testing.assert_array_equal(first.duration, second.duration)
        # Duration counts months in recession and is zero otherwise
        assert (first.duration[~first.in_recession] == 0).all()
        assert (first.duration[first.in_recession] >= 1).all()
