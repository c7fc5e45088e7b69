"""
Point forecasts from a decomposition.

Workflow:
1. Seasonal extension: the normalized per-phase pattern continues cyclically
   past the end of training
2. Trend extension: Holt's linear method fitted on the defined trend values,
   extrapolated from the last fitted point to each step past the end of training
3. Point forecast = seasonal extension + trend extension
"""

import numpy as np
import structlog
from statsmodels.tsa.holtwinters import Holt

from .core.errors import InsufficientDataError, InvalidParameterError
from .models import Decomposition, ForecastPoint, HoltFit, Series

logger = structlog.get_logger(__name__)

# Candidate values for both alpha and beta: 0.1, 0.2, ..., 1.0
SMOOTHING_GRID = np.round(np.arange(1, 11) * 0.1, 1)


def fit_holt(values: np.ndarray) -> HoltFit:
    """Fit Holt's linear method by grid search over (alpha, beta)

    The recursion starts from level_0 = y_0 and slope_0 = y_1 - y_0, and the
    model is scored on the one-step-ahead forecasts of y_1..y_n. Every grid pair
    is fitted with statsmodels; ties go to the first pair in grid order (smallest
    alpha, then smallest beta), so a given input always yields the same fit.

    Args:
        values: Trend values, oldest first, without undefined entries

    Raises:
        InsufficientDataError: If fewer than 2 values are given
    """
    y = np.asarray(values, dtype=float)
    if len(y) < 2:
        raise InsufficientDataError(
            f"Need at least 2 defined trend points to fit a slope, got {len(y)}"
        )

    if len(y) == 2:
        # Two points fix the line exactly
        return HoltFit(
            alpha=float(SMOOTHING_GRID[0]),
            beta=float(SMOOTHING_GRID[0]),
            level=float(y[1]),
            slope=float(y[1] - y[0]),
            sse=0.0,
        )

    model = Holt(
        y[1:],
        initialization_method="known",
        initial_level=y[0],
        initial_trend=y[1] - y[0],
    )

    fit = None
    # A perfect fit has sse == 0, whose log in the information criteria is -inf
    with np.errstate(divide="ignore", invalid="ignore"):
        for alpha in SMOOTHING_GRID:
            for beta in SMOOTHING_GRID:
                results = model.fit(
                    smoothing_level=float(alpha),
                    smoothing_trend=float(beta),
                    optimized=False,
                )
                sse = float(results.sse)
                if fit is None or sse < fit.sse:
                    fit = HoltFit(
                        alpha=float(alpha),
                        beta=float(beta),
                        level=float(np.asarray(results.level)[-1]),
                        slope=float(np.asarray(results.trend)[-1]),
                        sse=sse,
                    )

    logger.debug(
        "Holt trend fitted",
        n_points=len(y),
        alpha=fit.alpha,
        beta=fit.beta,
        slope=round(fit.slope, 5),
        sse=round(fit.sse, 5),
    )

    return fit


def forecast(
    decomposition: Decomposition, training: Series, horizon: int
) -> tuple[ForecastPoint, ...]:
    """Forecast the horizon steps following the training series

    Args:
        decomposition: Decomposition of training
        training: The training series (supplies length and time spacing)
        horizon: Number of future steps

    Returns:
        One ForecastPoint per future step, in order

    Raises:
        InvalidParameterError: If horizon < 1
        InsufficientDataError: If fewer than 2 trend values are defined
    """
    if horizon < 1:
        raise InvalidParameterError(f"horizon must be >= 1, got {horizon}")

    fit = fit_holt(decomposition.defined_trend())
    return extend(decomposition, training, fit, horizon)


def extend(
    decomposition: Decomposition, training: Series, fit: HoltFit, horizon: int
) -> tuple[ForecastPoint, ...]:
    """Assemble point forecasts from an already fitted trend

    The fitted level sits on the last defined trend value, trend_gap positions
    before the end of training; future step h lies h + trend_gap positions past it.
    """
    n = len(training)
    last_time = int(training.time_index[-1])
    step = training.step
    trend_extension = fit.extrapolate(horizon, offset=decomposition.trend_gap)

    points = []
    for h in range(1, horizon + 1):
        seasonal = float(decomposition.seasonal_pattern[decomposition.phase_of(n + h - 1)])
        trend = float(trend_extension[h - 1])
        points.append(
            ForecastPoint(
                time_index=last_time + h * step,
                step=h,
                point_forecast=seasonal + trend,
                seasonal=seasonal,
                trend=trend,
            )
        )

    return tuple(points)
