"""
Tests for indicator construction and mixing.
Column counts, parameter tag alignment and turning-point properties.
"""

import numpy as np
import pandas as pd
import pytest
from hypothesis import given, settings, strategies as st

from recession_lib.config_schemas import ConfigurationError, IndicatorGridConfig
from recession_lib.constants import (
    CURVING_PARAMETERS,
    N_INDICATORS,
    N_SMOOTHING,
    TURNING_WINDOWS,
)
from recession_lib.indicators import (
    Cyclicality,
    IndicatorFamily,
    ParameterTuple,
    backward_moving_average,
    build_indicator,
    curve,
    exponential_moving_average,
    mix_indicator,
    turning_distance,
)
from recession_lib.utils.timeline import make_timeline

SMALL_GRID = IndicatorGridConfig(
    sma_windows=[0, 2],
    ema_weights=[0.5],
    curving_parameters=[0.0, 1.0],
    turning_windows=[1, 3],
    mixing_weights=[0.0, 0.5, 1.0],
)


def rate_series(n_month=36, seed=7):
    rng = np.random.default_rng(seed)
    return 0.05 + 0.02 * np.sin(np.arange(n_month) / 5.0) + 0.002 * rng.random(n_month)


class TestSmoothing:
    """Backward moving averages and exponential filters."""

    def test_sma_window_zero_is_raw(self):
        x = rate_series()
        np.testing.assert_allclose(backward_moving_average(x, 0), x)

    def test_sma_truncates_at_sample_start(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        result = backward_moving_average(x, 2)
        np.testing.assert_allclose(result, [1.0, 1.5, 2.0, 3.0, 4.0])

    def test_ema_first_value_is_first_observation(self):
        x = rate_series()
        for weight in (0.1, 0.5, 0.9):
            assert exponential_moving_average(x, weight)[0] == pytest.approx(x[0])

    def test_ema_recursion(self):
        x = np.array([1.0, 3.0, 2.0])
        result = exponential_moving_average(x, 0.5)
        np.testing.assert_allclose(result, [1.0, 2.0, 2.0])

    def test_ema_weight_one_is_raw(self):
        x = rate_series()
        np.testing.assert_allclose(exponential_moving_average(x, 1.0), x)


class TestCurvature:
    """Box-Cox curvature transform."""

    def test_zero_is_log(self):
        x = rate_series()
        np.testing.assert_allclose(curve(x, 0.0), np.log(x))

    def test_one_is_shifted_linear(self):
        x = rate_series()
        np.testing.assert_allclose(curve(x, 1.0), x - 1.0)

    @given(k=st.floats(min_value=0.05, max_value=1.0))
    @settings(max_examples=50, deadline=None)
    def test_monotone_increasing(self, k):
        x = np.linspace(0.01, 0.3, 50)
        assert (np.diff(curve(x, k)) > 0).all()


class TestTurningDistance:
    """Distance from trailing extrema."""

    @given(
        values=st.lists(st.floats(min_value=0.001, max_value=1.0), min_size=1, max_size=60),
        window=st.integers(min_value=1, max_value=18),
        procyclical=st.booleans(),
    )
    @settings(max_examples=100, deadline=None)
    def test_non_negative(self, values, window, procyclical):
        result = turning_distance(np.array(values), window, procyclical)
        assert (result >= 0).all()

    @pytest.mark.parametrize("procyclical", [False, True])
    def test_constant_series_is_exactly_zero(self, procyclical):
        result = turning_distance(np.full(24, 0.05), 6, procyclical)
        assert (result == 0).all()

    def test_current_extremum_is_exactly_zero(self):
        # t=3 is its own trailing minimum
        x = np.array([0.2, 0.5, 0.4, 0.1, 0.3])
        result = turning_distance(x, 2, procyclical=False)
        np.testing.assert_allclose(result, [0.0, 0.3, 0.2, 0.0, 0.2])
        assert result[3] == 0.0

    def test_procyclical_measures_fall_from_maximum(self):
        x = np.array([0.5, 0.4, 0.6, 0.3])
        result = turning_distance(x, 1, procyclical=True)
        np.testing.assert_allclose(result, [0.0, 0.1, 0.0, 0.3])

    def test_window_must_be_positive(self):
        with pytest.raises(ValueError):
            turning_distance(np.ones(5), 0, procyclical=False)


class TestBuildIndicator:
    """Indicator family construction."""

    @pytest.fixture
    def raw(self):
        return rate_series()

    @pytest.fixture
    def timeline(self, raw):
        return make_timeline(2000.0, 2000.0 + (len(raw) - 1) / 12)

    def test_default_grid_column_count(self, raw):
        family = build_indicator(raw, 'countercyclical')

        assert family.n_columns == N_INDICATORS == 4356
        assert family.shape == (len(raw), 4356)
        assert len(family.parameters) == family.n_columns

    def test_column_order_smoothing_fastest(self, raw):
        family = build_indicator(raw, Cyclicality.COUNTERCYCLICAL)
        n_curving = len(CURVING_PARAMETERS)

        for s, c, t in [(0, 0, 0), (5, 3, 2), (21, 10, 17), (14, 0, 9)]:
            column = s + N_SMOOTHING * (c + n_curving * t)
            tag = family.parameter(column)
            assert tag.curving_parameter == CURVING_PARAMETERS[c]
            assert tag.turning_parameter == TURNING_WINDOWS[t]
            if s < 12:
                assert tag.smoothing_method == 'SMA'
                assert tag.smoothing_parameter == s
            else:
                assert tag.smoothing_method == 'EMA'

    def test_column_matches_its_parameters(self, raw):
        family = build_indicator(raw, 'procyclical', grid=SMALL_GRID)

        for i in range(family.n_columns):
            tag = family.parameter(i)
            if tag.smoothing_method == 'SMA':
                smoothed = backward_moving_average(raw, int(tag.smoothing_parameter))
            else:
                smoothed = exponential_moving_average(raw, tag.smoothing_parameter)
            expected = turning_distance(curve(smoothed, tag.curving_parameter), tag.turning_parameter, True)
            np.testing.assert_allclose(family.column(i), expected)

    def test_timeline_is_attached(self, raw, timeline):
        family = build_indicator(raw, 'countercyclical', timeline, SMALL_GRID)

        np.testing.assert_array_equal(family.timeline, timeline)
        frame = family.to_frame()
        assert frame.index.name == 'date'
        assert frame.shape == (len(raw), SMALL_GRID.n_indicators)

    def test_plain_array_with_timeline(self, timeline):
        raw = np.array([0.04, 0.04, 0.05, 0.08, 0.10, 0.07, 0.05, 0.04])
        family = build_indicator(raw, 'countercyclical', timeline[:len(raw)], SMALL_GRID)

        assert family.shape == (len(raw), SMALL_GRID.n_indicators)
        assert np.isfinite(family.values).all()

    def test_named_series_with_timeline(self, raw, timeline):
        series = pd.Series(raw, name="unemployment")
        family = build_indicator(series, 'countercyclical', timeline, SMALL_GRID)

        np.testing.assert_allclose(family.values, build_indicator(raw, 'countercyclical', timeline, SMALL_GRID).values)
        np.testing.assert_array_equal(family.timeline, timeline)

    def test_invalid_cyclicality(self, raw):
        with pytest.raises(ConfigurationError):
            build_indicator(raw, 'sideways', grid=SMALL_GRID)

    def test_non_positive_raw_series(self, raw):
        raw = raw.copy()
        raw[4] = 0.0
        with pytest.raises(ValueError):
            build_indicator(raw, 'countercyclical', grid=SMALL_GRID)

    def test_timeline_length_mismatch(self, raw, timeline):
        with pytest.raises(ConfigurationError):
            build_indicator(raw, 'countercyclical', timeline[:-1], SMALL_GRID)

    def test_window_slices_rows(self, raw, timeline):
        family = build_indicator(raw, 'countercyclical', timeline, SMALL_GRID)
        window = family.window(2000.5, 2001.0)

        assert window.n_month == 7
        assert window.timeline[0] == pytest.approx(2000.5)
        assert window.timeline[-1] == pytest.approx(2001.0)
        assert window.n_columns == family.n_columns


class TestMixIndicator:
    """Mixing of two indicator families."""

    @pytest.fixture
    def families(self):
        timeline = make_timeline(2000.0, 2002.92)
        unemployment = build_indicator(rate_series(seed=1), 'countercyclical', timeline, SMALL_GRID)
        vacancy = build_indicator(rate_series(seed=2), 'procyclical', timeline, SMALL_GRID)
        return unemployment, vacancy

    def test_column_count(self, families):
        first, second = families
        mixed = mix_indicator(first, second, SMALL_GRID.mixing_weights)

        assert mixed.n_columns == SMALL_GRID.n_mixed == 2 * 3 * first.n_columns
        assert len(mixed.parameters) == mixed.n_columns
        assert set(mixed.parameters['mixing_method']) == {'linear', 'minmax'}

    def test_column_order_and_values(self, families):
        first, second = families
        weights = SMALL_GRID.mixing_weights
        mixed = mix_indicator(first, second, weights)
        m = first.n_columns

        for i_method, method in enumerate(['linear', 'minmax']):
            for i_weight, zeta in enumerate(weights):
                for i_column in (0, m - 1):
                    index = i_column + m * (i_weight + len(weights) * i_method)
                    tag = mixed.parameter(index)
                    assert tag.mixing_method == method
                    assert tag.mixing_parameter == zeta
                    assert tag.smoothing_parameter == first.parameter(i_column).smoothing_parameter

                    x = first.column(i_column)
                    y = second.column(i_column)
                    if method == 'linear':
                        expected = zeta * x + (1 - zeta) * y
                    else:
                        expected = zeta * np.minimum(x, y) + (1 - zeta) * np.maximum(x, y)
                    np.testing.assert_allclose(mixed.column(index), expected)

    def test_default_weights(self, families):
        first, second = families
        mixed = mix_indicator(first, second)
        assert mixed.n_columns == 22 * first.n_columns

    def test_shape_mismatch(self, families):
        first, second = families
        with pytest.raises(ConfigurationError):
            mix_indicator(first, second.select(range(second.n_columns - 1)))

    def test_tag_mismatch(self, families):
        first, second = families
        parameters = second.parameters.copy()
        parameters['turning_parameter'] = parameters['turning_parameter'] + 1
        relabelled = IndicatorFamily(second.values, parameters, second.timeline)

        with pytest.raises(ConfigurationError):
            mix_indicator(first, relabelled)

    def test_timeline_mismatch(self, families):
        first, second = families
        shifted = IndicatorFamily(second.values, second.parameters, second.timeline + 1.0)

        with pytest.raises(ConfigurationError):
            mix_indicator(first, shifted)


class TestParameterTuple:

    def test_from_row_unmixed(self):
        row = pd.Series({
            'smoothing_method': 'EMA',
            'smoothing_parameter': 0.3,
            'curving_parameter': 0.5,
            'turning_parameter': 4,
            'mixing_method': None,
            'mixing_parameter': np.nan,
        })
        tag = ParameterTuple.from_row(row)

        assert not tag.is_mixed
        assert tag == ParameterTuple('EMA', 0.3, 0.5, 4)
        assert tag.mixing_parameter is None
