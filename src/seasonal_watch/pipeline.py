"""
End-to-end pipeline: split -> decompose -> forecast -> interval -> detect.

Stages run in a fixed order. A failing stage aborts the run; the error is logged
with the stage name and re-raised unchanged, and no partial result is returned.
"""

import time
from enum import Enum

import structlog

from .decomposition import decompose
from .detector import flag
from .forecaster import extend, fit_holt
from .interval import bounds_for, residual_std
from .models import PipelineConfig, PipelineResult, Series
from .series import split

logger = structlog.get_logger(__name__)


class PipelineStage(Enum):
    """Stages of a pipeline run, in execution order"""

    START = "start"
    SPLIT = "split"
    DECOMPOSE = "decompose"
    FORECAST = "forecast"
    ESTIMATE_INTERVAL = "estimate_interval"
    DETECT_ANOMALIES = "detect_anomalies"
    DONE = "done"


class SeasonalAnomalyPipeline:
    """Decides whether the last horizon observations of a series are genuine
    movement or ordinary noise"""

    def __init__(self, config: PipelineConfig | None = None):
        self.config = config or PipelineConfig()

    def run(self, series: Series) -> PipelineResult:
        """Run every stage on a series

        Args:
            series: Observed series whose last config.horizon points are checked

        Returns:
            PipelineResult with per-holdout comparisons and the decomposition

        Raises:
            InsufficientDataError: If the series is too short at any stage
            InvalidParameterError: If a parameter is out of range
        """
        config = self.config
        stage = PipelineStage.START
        start_time = time.time()

        logger.info(
            "Starting pipeline",
            n_points=len(series),
            period_length=config.period_length,
            horizon=config.horizon,
            confidence_level=config.confidence_level,
            interval_growth=config.interval_growth,
        )

        try:
            stage = PipelineStage.SPLIT
            training, holdout = split(series, config.horizon, config.period_length)

            stage = PipelineStage.DECOMPOSE
            decomposition = decompose(training, config.period_length)

            stage = PipelineStage.FORECAST
            trend_fit = fit_holt(decomposition.defined_trend())
            forecast = extend(decomposition, training, trend_fit, config.horizon)

            stage = PipelineStage.ESTIMATE_INTERVAL
            sigma = residual_std(decomposition)
            bounds = bounds_for(
                forecast, sigma, config.confidence_level, config.interval_growth
            )

            stage = PipelineStage.DETECT_ANOMALIES
            points = flag(holdout, forecast, bounds)

        except Exception as e:
            logger.error(
                "Pipeline failed",
                stage=stage.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        stage = PipelineStage.DONE
        result = PipelineResult(
            points=points,
            decomposition=decomposition,
            trend_fit=trend_fit,
            residual_std=sigma,
            config=config,
        )

        logger.info(
            "Pipeline completed",
            stage=stage.value,
            anomalies=result.anomaly_count,
            residual_std=round(result.residual_std, 4),
            elapsed_ms=round((time.time() - start_time) * 1000, 1),
        )

        return result


def run_pipeline(
    series: Series,
    period_length: int = 7,
    horizon: int = 7,
    confidence_level: float = 0.95,
    interval_growth: str = "sqrt",
) -> PipelineResult:
    """Convenience wrapper around SeasonalAnomalyPipeline"""
    config = PipelineConfig(
        period_length=period_length,
        horizon=horizon,
        confidence_level=confidence_level,
        interval_growth=interval_growth,
    )
    return SeasonalAnomalyPipeline(config).run(series)
