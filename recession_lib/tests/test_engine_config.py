"""
Tests for configuration, input validation, timelines and true events.
"""

import numpy as np
import pandas as pd
import pytest
import yaml
from structlog.testing import capture_logs

from recession_lib.config_schemas import (
    ConfigurationError,
    EngineConfig,
    IndicatorGridConfig,
    ThresholdGridConfig,
    load_config,
)
from recession_lib.constants import N_INDICATORS, default_threshold_grid
from recession_lib.data_validation import DataValidator
from recession_lib.interfaces import RawSeriesSource, TrueEvents, TrueEventsSource
from recession_lib.logging_config import DataSnapshotProcessor, InstrumentedLogger, hash_array
from recession_lib.utils.timeline import decimal_year, make_timeline, window_mask


class TestEngineConfig:
    """Pydantic configuration models."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.indicators.n_indicators == N_INDICATORS == 4356
        assert config.indicators.n_mixed == 22 * 4356
        assert config.search.backend == 'serial'
        assert config.ensemble.std_error_max == 3.0

    def test_default_threshold_grid(self):
        grid = ThresholdGridConfig().grid()

        assert len(grid) == 5000
        assert grid[0] == 0.0001
        assert grid[-1] == 0.5
        np.testing.assert_array_equal(grid, default_threshold_grid())
        assert (np.diff(grid) > 0).all()

    @pytest.mark.parametrize("grid", [
        {'sma_windows': [-1, 2]},
        {'ema_weights': [0.0]},
        {'curving_parameters': [1.5]},
        {'turning_windows': [0]},
        {'mixing_weights': []},
        {'turning_windows': [3, 3]},
    ])
    def test_invalid_indicator_grid(self, grid):
        with pytest.raises(ConfigurationError) as excinfo:
            load_config({'indicators': grid})
        assert 'indicators' in str(excinfo.value)

    def test_inverted_threshold_grid(self):
        with pytest.raises(ConfigurationError):
            load_config({'thresholds': {'start': 0.3, 'stop': 0.1}})

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            load_config({'search': {'backend': 'threads'}})

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text(yaml.safe_dump({
            'indicators': {'sma_windows': [0, 3], 'turning_windows': [6]},
            'search': {'backend': 'serial', 'n_chunks': 8},
            'ensemble': {'std_error_max': 2.5},
        }))
        config = EngineConfig.from_yaml(path)

        assert config.indicators.sma_windows == [0, 3]
        assert config.indicators.n_indicators == 12 * 11 * 1
        assert config.search.n_chunks == 8
        assert config.ensemble.std_error_max == 2.5

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert EngineConfig.from_yaml(path).thresholds.step == 0.0001

    def test_direct_model_validation(self):
        with pytest.raises(ValueError):
            IndicatorGridConfig(ema_weights=[1.2])


class TestDataValidator:
    """Pandera schemas for engine inputs."""

    def test_raw_series_returns_array(self):
        result = DataValidator.validate_raw_series(pd.Series([0.05, 0.06]))
        assert isinstance(result, np.ndarray)
        assert result.dtype == np.float64

    @pytest.mark.parametrize("values", [[0.05, -0.01], [0.05, np.nan], [0.05, np.inf]])
    def test_invalid_raw_series(self, values):
        with pytest.raises(ValueError):
            DataValidator.validate_raw_series(np.array(values), context="unemployment")

    def test_named_raw_series(self):
        result = DataValidator.validate_raw_series(pd.Series([0.05, 0.06], name="vacancy"))
        np.testing.assert_array_equal(result, [0.05, 0.06])

    def test_timeline_returns_array(self):
        result = DataValidator.validate_timeline([2000.0, 2000.08, 2000.17])
        np.testing.assert_array_equal(result, [2000.0, 2000.08, 2000.17])

    def test_timeline_must_increase(self):
        with pytest.raises(ValueError):
            DataValidator.validate_timeline(np.array([2000.0, 2000.08, 2000.08]))

    def test_event_end_before_start(self):
        with pytest.raises(ValueError):
            DataValidator.validate_events(pd.DataFrame({'start': [2001.0], 'end': [2000.0]}))


class TestTimeline:
    """Decimal-year dates."""

    def test_decimal_year(self):
        assert decimal_year(2001, 1) == 2001.0
        assert decimal_year(2001, 3) == 2001.17
        np.testing.assert_array_equal(decimal_year(np.array([2000, 2000]), np.array([7, 12])), [2000.5, 2000.92])

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            decimal_year(2001, 13)

    def test_make_timeline(self):
        timeline = make_timeline(1951.0, 2019.92)

        assert len(timeline) == 69 * 12
        assert timeline[0] == 1951.0
        assert timeline[-1] == 2019.92
        assert (np.diff(timeline) > 0).all()

    def test_window_mask_is_inclusive(self):
        timeline = make_timeline(2000.0, 2000.92)
        mask = window_mask(timeline, 2000.25, 2000.5)
        np.testing.assert_array_equal(timeline[mask], [2000.25, 2000.33, 2000.42, 2000.5])


class TestTrueEvents:
    """Known historical events."""

    def test_from_peaks_troughs(self):
        events = TrueEvents.from_peaks_troughs([2007.92, 2020.08], [2009.42, 2020.25])

        np.testing.assert_allclose(events.starts, [2008.0, 2020.17])
        assert events.count == len(events) == 2
        assert events.label == "recessions"

    def test_sorted_by_start(self):
        events = TrueEvents(starts=np.array([2008.0, 2001.17]), ends=np.array([2009.42, 2001.83]))
        np.testing.assert_array_equal(events.starts, [2001.17, 2008.0])
        np.testing.assert_array_equal(events.ends, [2001.83, 2009.42])

    def test_within(self):
        events = TrueEvents.from_starts([1990.58, 2001.25, 2008.0])
        window = events.within(1995.0, 2008.0)

        np.testing.assert_array_equal(window.starts, [2001.25, 2008.0])
        assert window.to_frame().shape == (2, 2)

    def test_invalid_events(self):
        with pytest.raises(ValueError):
            TrueEvents(starts=np.array([2001.0]), ends=np.array([2000.0]))

    def test_source_protocols(self):
        class StaticEvents:
            def load(self, begin, end):
                return TrueEvents.from_starts([2008.0]).within(begin, end)

        assert isinstance(StaticEvents(), TrueEventsSource)
        assert isinstance(StaticEvents(), RawSeriesSource)
        assert not isinstance(object(), TrueEventsSource)


class TestInstrumentedLogger:
    """Structured logging helpers."""

    def test_hash_array(self):
        assert hash_array(np.empty(0)) == "empty"
        assert hash_array(np.ones(3)) == hash_array(np.ones(3))
        assert hash_array(np.ones(3)) != hash_array(np.zeros(3))

    def test_large_array_snapshot(self):
        snapshot = DataSnapshotProcessor.process_data(np.arange(500, dtype=float))

        assert snapshot['shape'] == (500,)
        assert snapshot['min'] == 0.0
        assert snapshot['max'] == 499.0
        assert 'data' not in snapshot

    def test_quality_warning_is_logged(self):
        with capture_logs() as logs:
            InstrumentedLogger("test").log_quality_warning("select_ensemble", "empty", {"n": 0})

        assert logs[0]['log_level'] == 'warning'
        assert logs[0]['stage'] == 'select_ensemble'

    def test_frame_snapshot(self):
        frame = pd.DataFrame({'4@0.1000': [0.0, 0.5, 1.0]})
        snapshot = DataSnapshotProcessor.process_data(frame)

        assert snapshot['type'] == 'DataFrame'
        assert snapshot['shape'] == (3, 1)
        assert snapshot['columns'] == ['4@0.1000']
