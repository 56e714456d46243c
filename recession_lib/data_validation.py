"""
Data validation schemas using Pandera.

Validates the raw inputs handed to the engine by external loaders:
labor-market rate series, decimal-year timelines and true event dates.

"""

from typing import Union

import numpy as np
import pandas as pd
import pandera as pa


def check_strictly_increasing(series: pd.Series) -> bool:
    """Check that a timeline is strictly increasing."""
    return bool((series.diff().dropna() > 0).all())


def check_finite(series: pd.Series) -> bool:
    """Check that series contains no infinite values."""
    return not np.isinf(series.values).any()


# Raw labor-market rate (unemployment or vacancy), one value per month
RawSeriesSchema = pa.SeriesSchema(
    float,
    checks=[
        pa.Check.greater_than(0, name="positive_rate"),  # Log curvature needs x > 0
        pa.Check(check_finite, name="finite_rate"),
    ],
    nullable=False,
    coerce=True
)


# Monthly decimal-year timeline
TimelineSchema = pa.SeriesSchema(
    float,
    checks=[
        pa.Check(check_strictly_increasing, name="strictly_increasing"),
        pa.Check(check_finite, name="finite_dates"),
    ],
    nullable=False,
    coerce=True
)


# True event start/end dates in decimal years
TrueEventsSchema = pa.DataFrameSchema(
    columns={
        "start": pa.Column(float, nullable=False, coerce=True, description="Event start date"),
        "end": pa.Column(float, nullable=False, coerce=True, description="Event end date"),
    },
    checks=[
        pa.Check(lambda df: (df["end"] >= df["start"]).all(), name="end_after_start"),
    ],
    strict=True,
    name="TrueEventsSchema"
)


def _as_series(data: Union[np.ndarray, pd.Series, list]) -> pd.Series:
    if isinstance(data, pd.Series):
        return data
    return pd.Series(np.asarray(data, dtype=float))


class DataValidator:
    """
    Validator for engine inputs.
    """

    @staticmethod
    def validate_raw_series(data: Union[np.ndarray, pd.Series], context: str = "") -> np.ndarray:
        """
        Validate a raw monthly rate series.

        Args:
            data: Raw series values
            context: Context string for error messages

        Returns:
            Validated values as float array

        Raises:
            ValueError: If validation fails
        """
        try:
            return RawSeriesSchema.validate(_as_series(data)).to_numpy(dtype=float)
        except pa.errors.SchemaError as e:
            error_msg = f"Raw series validation failed at {context}: {str(e)}"
            raise ValueError(error_msg) from e

    @staticmethod
    def validate_timeline(data: Union[np.ndarray, pd.Series], context: str = "") -> np.ndarray:
        """
        Validate a decimal-year timeline.

        Args:
            data: Timeline values
            context: Context string for error messages

        Returns:
            Validated values as float array

        Raises:
            ValueError: If validation fails
        """
        try:
            return TimelineSchema.validate(_as_series(data)).to_numpy(dtype=float)
        except pa.errors.SchemaError as e:
            error_msg = f"Timeline validation failed at {context}: {str(e)}"
            raise ValueError(error_msg) from e

    @staticmethod
    def validate_events(df: pd.DataFrame, context: str = "") -> pd.DataFrame:
        """
        Validate true event dates.

        Args:
            df: DataFrame with start and end columns
            context: Context string for error messages

        Returns:
            Validated DataFrame

        Raises:
            ValueError: If validation fails
        """
        try:
            return TrueEventsSchema.validate(df)
        except pa.errors.SchemaError as e:
            error_msg = f"True events validation failed at {context}: {str(e)}"
            raise ValueError(error_msg) from e
