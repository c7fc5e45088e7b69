"""
Seasonal decomposition, forecasting and anomaly flagging for periodic metrics.
"""

from .core.errors import InsufficientDataError, InvalidParameterError, SeasonalWatchError
from .decomposition import decompose
from .detector import flag
from .forecaster import fit_holt, forecast
from .interval import bounds_for, interval, residual_std
from .models import (
    Bounds,
    Decomposition,
    ForecastPoint,
    HoldoutPoint,
    HoltFit,
    Observation,
    PipelineConfig,
    PipelineResult,
    Series,
)
from .pipeline import PipelineStage, SeasonalAnomalyPipeline, run_pipeline
from .series import split

__all__ = [
    "Bounds",
    "Decomposition",
    "ForecastPoint",
    "HoldoutPoint",
    "HoltFit",
    "InsufficientDataError",
    "InvalidParameterError",
    "Observation",
    "PipelineConfig",
    "PipelineResult",
    "PipelineStage",
    "SeasonalAnomalyPipeline",
    "SeasonalWatchError",
    "Series",
    "bounds_for",
    "decompose",
    "fit_holt",
    "flag",
    "forecast",
    "interval",
    "residual_std",
    "run_pipeline",
    "split",
]
