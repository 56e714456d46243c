"""
Configuration schema validation using Pydantic.

Provides validated configuration models for every stage of the engine:
indicator grids, the threshold sweep, the ensemble precision bar and logging.
Configuration errors are caught at load time, before any heavy array work.

"""

from pathlib import Path
from typing import List, Literal, Optional, Union

import numpy as np
import yaml
from pydantic import BaseModel, Field, ValidationError, validator

from recession_lib import constants


class ConfigurationError(ValueError):
    """Raised when the engine is configured inconsistently."""
    pass


def _check_unique(v: List, name: str) -> List:
    if not v:
        raise ValueError(f"{name} grid must not be empty")
    if len(set(v)) != len(v):
        raise ValueError(f"{name} grid contains duplicate values: {v}")
    return v


class IndicatorGridConfig(BaseModel):
    """Parameter grids for indicator construction and mixing."""
    sma_windows: List[int] = Field(
        default_factory=lambda: list(constants.SMA_WINDOWS),
        description="Backward moving-average windows in months (0 = raw series)"
    )
    ema_weights: List[float] = Field(
        default_factory=lambda: list(constants.EMA_WEIGHTS),
        description="Exponential smoothing decay weights"
    )
    curving_parameters: List[float] = Field(
        default_factory=lambda: list(constants.CURVING_PARAMETERS),
        description="Box-Cox curvature parameters (0 = log, 1 = linear)"
    )
    turning_windows: List[int] = Field(
        default_factory=lambda: list(constants.TURNING_WINDOWS),
        description="Turning-point windows in months"
    )
    mixing_weights: List[float] = Field(
        default_factory=lambda: list(constants.MIXING_WEIGHTS),
        description="Weights for linear and minmax mixing"
    )

    @validator('sma_windows')
    def validate_sma_windows(cls, v):
        """SMA windows are non-negative month counts."""
        for window in v:
            if window < 0:
                raise ValueError(f"SMA window must be non-negative, got {window}")
        return _check_unique(v, "SMA window")

    @validator('ema_weights')
    def validate_ema_weights(cls, v):
        """EMA weights live in (0, 1]."""
        for weight in v:
            if not 0 < weight <= 1:
                raise ValueError(f"EMA weight must be in (0, 1], got {weight}")
        return _check_unique(v, "EMA weight")

    @validator('curving_parameters')
    def validate_curving(cls, v):
        """Curvature parameters live in [0, 1]."""
        for k in v:
            if not 0 <= k <= 1:
                raise ValueError(f"Curving parameter must be in [0, 1], got {k}")
        return _check_unique(v, "Curving parameter")

    @validator('turning_windows')
    def validate_turning(cls, v):
        """Turning windows span at least one month."""
        for window in v:
            if window < 1:
                raise ValueError(f"Turning window must be >= 1, got {window}")
        return _check_unique(v, "Turning window")

    @validator('mixing_weights')
    def validate_mixing(cls, v):
        """Mixing weights live in [0, 1]."""
        for zeta in v:
            if not 0 <= zeta <= 1:
                raise ValueError(f"Mixing weight must be in [0, 1], got {zeta}")
        return _check_unique(v, "Mixing weight")

    @property
    def n_smoothing(self) -> int:
        return len(self.sma_windows) + len(self.ema_weights)

    @property
    def n_indicators(self) -> int:
        """Columns produced by build_indicator for one raw series."""
        return self.n_smoothing * len(self.curving_parameters) * len(self.turning_windows)

    @property
    def n_mixed(self) -> int:
        """Columns produced by mix_indicator from two pure families."""
        return constants.N_MIXING_METHODS * len(self.mixing_weights) * self.n_indicators


class ThresholdGridConfig(BaseModel):
    """Threshold grid swept by the perfect classifier search."""
    start: float = Field(constants.THRESHOLD_START, gt=0, description="First threshold")
    stop: float = Field(constants.THRESHOLD_STOP, gt=0, description="Last threshold (inclusive)")
    step: float = Field(constants.THRESHOLD_STEP, gt=0, description="Grid spacing")
    decimals: int = Field(constants.THRESHOLD_DECIMALS, ge=0, description="Rounding precision")

    @validator('stop')
    def validate_stop(cls, v, values):
        """Ensure the grid is not inverted."""
        if 'start' in values and v < values['start']:
            raise ValueError(f"Threshold stop {v} must be >= start {values['start']}")
        return v

    def grid(self) -> np.ndarray:
        """Rounded, strictly increasing threshold array."""
        n = int(round((self.stop - self.start) / self.step)) + 1
        return np.round(self.start + self.step * np.arange(n), self.decimals)


class SearchConfig(BaseModel):
    """Execution settings for the threshold sweep."""
    backend: Literal['serial', 'ray'] = Field('serial', description="Sweep executor")
    n_chunks: int = Field(16, ge=1, description="Threshold chunks submitted as tasks")


class EnsembleConfig(BaseModel):
    """High-precision ensemble selection."""
    std_error_max: float = Field(
        constants.STD_ERROR_MAX, gt=0,
        description="Maximum standard deviation of timing errors (months)"
    )


class LoggingConfig(BaseModel):
    """Structured logging settings."""
    level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = Field('INFO')
    file: Optional[str] = Field(None, description="Append logs to this file instead of stdout")


class EngineConfig(BaseModel):
    """Complete configuration for the recession classifier engine."""
    indicators: IndicatorGridConfig = Field(default_factory=IndicatorGridConfig)
    thresholds: ThresholdGridConfig = Field(default_factory=ThresholdGridConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    ensemble: EnsembleConfig = Field(default_factory=EnsembleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EngineConfig":
        """Load and validate configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return load_config(data, context=str(path))


def load_config(data: dict, context: str = "") -> EngineConfig:
    """
    Validate a configuration dictionary.

    Args:
        data: Raw configuration mapping
        context: Context string for error messages

    Returns:
        Validated EngineConfig

    Raises:
        ConfigurationError: If any section fails validation
    """
    try:
        return EngineConfig(**data)
    except ValidationError as e:
        sections = sorted({str(err['loc'][0]) for err in e.errors() if err.get('loc')})
        error_msg = f"Invalid configuration {context} in section(s) {sections}: {e}"
        raise ConfigurationError(error_msg) from e
