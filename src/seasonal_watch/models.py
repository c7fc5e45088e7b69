"""
Data models for the seasonal forecasting pipeline.

Every model is immutable once built: numpy arrays held by a model are private
copies flagged read-only, so a stage can hand its output to the next one without
the risk of in-place mutation.
"""

import math
from collections.abc import Iterable, Iterator
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
import pandas as pd

from .core.errors import InvalidParameterError


def _frozen(values: Any, dtype: Any = float) -> np.ndarray:
    """Copy values into a read-only numpy array"""
    array = np.array(values, dtype=dtype)
    array.setflags(write=False)
    return array


def _optional(value: float) -> float | None:
    """Map NaN ("undefined") to None for serialization"""
    return None if math.isnan(value) else float(value)


@dataclass(frozen=True)
class Observation:
    """A single (time_index, value) pair"""

    time_index: int
    value: float


@dataclass(frozen=True, eq=False)
class Series:
    """Ordered, evenly spaced numeric observations

    Insertion order is temporal order. Time indices are ordinals (e.g. day numbers)
    and must be strictly increasing with a constant step; values must be finite.
    """

    time_index: np.ndarray
    values: np.ndarray

    def __post_init__(self):
        try:
            times = np.asarray(self.time_index, dtype=float)
            values = np.asarray(self.values, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"Series must contain numeric data: {e}") from e

        if times.ndim != 1 or values.ndim != 1:
            raise InvalidParameterError("Series must be one-dimensional")
        if len(times) != len(values):
            raise InvalidParameterError(
                f"Length mismatch: {len(times)} time indices for {len(values)} values"
            )
        if not np.all(np.isfinite(times)) or np.any(times != np.round(times)):
            raise InvalidParameterError("Time indices must be integer ordinals")
        if not np.all(np.isfinite(values)):
            raise InvalidParameterError("Series contains missing or non-finite values")

        if len(times) > 1:
            steps = np.diff(times)
            if steps[0] <= 0 or np.any(steps != steps[0]):
                raise InvalidParameterError(
                    "Time indices must be strictly increasing and evenly spaced (no gaps)"
                )

        object.__setattr__(self, "time_index", _frozen(times, np.int64))
        object.__setattr__(self, "values", _frozen(values))

    @classmethod
    def from_observations(cls, observations: Iterable[Observation | tuple]) -> "Series":
        """Build a series from Observation objects or (time_index, value) pairs"""
        pairs = [
            (obs.time_index, obs.value) if isinstance(obs, Observation) else tuple(obs)
            for obs in observations
        ]
        if not pairs:
            return cls(np.array([], dtype=np.int64), np.array([], dtype=float))
        times, values = zip(*pairs)
        return cls(np.asarray(times), np.asarray(values, dtype=float))

    @classmethod
    def from_frame(
        cls, df: pd.DataFrame, time_column: str = "date", value_column: str = "value"
    ) -> "Series":
        """Build a series from a DataFrame

        Datetime columns are converted to day ordinals, so daily data must not
        skip dates.

        Raises:
            InvalidParameterError: If a column is missing or the data is malformed
        """
        missing = {time_column, value_column} - set(df.columns)
        if missing:
            raise InvalidParameterError(f"DataFrame missing required columns: {missing}")

        times = df[time_column]
        if pd.api.types.is_datetime64_any_dtype(times):
            times = times.map(lambda ts: ts.toordinal())

        return cls(times.to_numpy(), df[value_column].to_numpy(dtype=float))

    @property
    def step(self) -> int:
        """Spacing between consecutive time indices"""
        if len(self.time_index) < 2:
            return 1
        return int(self.time_index[1] - self.time_index[0])

    def slice(self, start: int | None = None, stop: int | None = None) -> "Series":
        return Series(self.time_index[start:stop], self.values[start:stop])

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"time_index": self.time_index, "value": self.values})

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, position: int) -> Observation:
        return Observation(int(self.time_index[position]), float(self.values[position]))

    def __iter__(self) -> Iterator[Observation]:
        for position in range(len(self)):
            yield self[position]


@dataclass(frozen=True, eq=False)
class Decomposition:
    """Seasonal, trend and residual components of a training series

    Arrays are aligned position by position with the training series. Trend and
    residual are NaN where the centered moving average is undefined (the first and
    last period_length // 2 points).
    """

    time_index: np.ndarray
    observed: np.ndarray
    seasonal: np.ndarray
    trend: np.ndarray
    residual: np.ndarray
    period_length: int
    seasonal_pattern: np.ndarray  # normalized value per phase, sums to zero

    def __post_init__(self):
        object.__setattr__(self, "time_index", _frozen(self.time_index, np.int64))
        for name in ("observed", "seasonal", "trend", "residual", "seasonal_pattern"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def trend_defined(self) -> np.ndarray:
        """Boolean mask of positions where trend (and residual) are defined"""
        return ~np.isnan(self.trend)

    def defined_trend(self) -> np.ndarray:
        return self.trend[self.trend_defined]

    def defined_residuals(self) -> np.ndarray:
        return self.residual[~np.isnan(self.residual)]

    @property
    def trend_gap(self) -> int:
        """Positions between the last defined trend value and the last observation"""
        defined = np.flatnonzero(self.trend_defined)
        if len(defined) == 0:
            return len(self.trend)
        return int(len(self.trend) - 1 - defined[-1])

    def phase_of(self, position: int) -> int:
        """Phase of a position counted from the start of training (may lie past the end)"""
        return position % self.period_length

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "time_index": self.time_index,
                "observed": self.observed,
                "seasonal": self.seasonal,
                "trend": self.trend,
                "residual": self.residual,
            }
        )

    def to_records(self) -> list[dict]:
        """Per-position records; undefined components are None"""
        return [
            {
                "time_index": int(t),
                "observed": float(obs),
                "seasonal": float(seas),
                "trend": _optional(trend),
                "residual": _optional(resid),
            }
            for t, obs, seas, trend, resid in zip(
                self.time_index, self.observed, self.seasonal, self.trend, self.residual
            )
        ]

    def __len__(self) -> int:
        return len(self.observed)


@dataclass(frozen=True)
class HoltFit:
    """Holt's linear smoothing fitted on the defined trend values"""

    alpha: float
    beta: float
    level: float  # final smoothed level
    slope: float  # final smoothed slope
    sse: float  # sum of squared one-step-ahead errors

    def extrapolate(self, horizon: int, offset: int = 0) -> np.ndarray:
        """Trend extension for steps 1..horizon

        offset is the number of positions between the last fitted trend point and
        the point the steps are counted from.
        """
        steps = np.arange(1, horizon + 1, dtype=float) + offset
        return self.level + steps * self.slope


@dataclass(frozen=True)
class ForecastPoint:
    """Point forecast for one future step"""

    time_index: int
    step: int  # 1-based horizon step
    point_forecast: float
    seasonal: float
    trend: float


@dataclass(frozen=True)
class Bounds:
    """Prediction interval for one forecast step"""

    lower_bound: float
    upper_bound: float
    half_width: float


@dataclass(frozen=True)
class HoldoutPoint:
    """A holdout observation compared against its forecast interval"""

    time_index: int
    actual: float
    point_forecast: float
    lower_bound: float
    upper_bound: float
    is_anomaly: bool

    @property
    def deviation(self) -> float:
        return self.actual - self.point_forecast

    @property
    def direction(self) -> str | None:
        """'above' or 'below' the interval when anomalous, else None"""
        if not self.is_anomaly:
            return None
        return "above" if self.actual > self.upper_bound else "below"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = asdict(self)
        data["deviation"] = self.deviation
        data["direction"] = self.direction
        return data


@dataclass(frozen=True)
class PipelineConfig:
    """Parameters of one pipeline run"""

    period_length: int = 7  # weekly seasonality on daily data
    horizon: int = 7  # the last week is compared against the forecast
    confidence_level: float = 0.95
    interval_growth: str = "sqrt"  # see seasonal_watch.interval.GROWTH_REGISTRY


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """Outcome of a full pipeline run"""

    points: tuple[HoldoutPoint, ...]
    decomposition: Decomposition
    trend_fit: HoltFit
    residual_std: float
    config: PipelineConfig

    @property
    def anomalies(self) -> tuple[HoldoutPoint, ...]:
        return tuple(point for point in self.points if point.is_anomaly)

    @property
    def anomaly_count(self) -> int:
        return len(self.anomalies)

    @property
    def has_anomalies(self) -> bool:
        return self.anomaly_count > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "config": asdict(self.config),
            "residual_std": self.residual_std,
            "trend_fit": asdict(self.trend_fit),
            "anomaly_count": self.anomaly_count,
            "points": [point.to_dict() for point in self.points],
            "decomposition": self.decomposition.to_records(),
        }

    def to_frame(self) -> pd.DataFrame:
        """Holdout comparison as a DataFrame, one row per holdout observation"""
        return pd.DataFrame([point.to_dict() for point in self.points])
