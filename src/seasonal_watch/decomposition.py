"""
Classical additive decomposition of a training series.

The series is split into Trend + Seasonal + Residual:
1. Trend: centered moving average over one period (2xp filter for even periods)
2. Seasonal: per-phase mean of the detrended values, normalized to sum to zero
3. Residual: what remains once trend and seasonal are removed

Trend and residual stay undefined (NaN) at both edges of the series, where the
centered window does not fit. They are never filled or extrapolated.
"""

import numpy as np
import structlog
from statsmodels.tsa.seasonal import seasonal_decompose

from .core.errors import InsufficientDataError, InvalidParameterError
from .models import Decomposition, Series

logger = structlog.get_logger(__name__)


def decompose(training: Series, period_length: int) -> Decomposition:
    """Decompose a training series with a known period

    Args:
        training: Training series, at least two full periods long
        period_length: Number of observations per seasonal cycle (e.g. 7 for
            weekly seasonality on daily data)

    Returns:
        Decomposition aligned position by position with training

    Raises:
        InvalidParameterError: If period_length < 2
        InsufficientDataError: If training holds fewer than two full periods
    """
    if period_length < 2:
        raise InvalidParameterError(f"period_length must be >= 2, got {period_length}")

    n = len(training)
    if n < 2 * period_length:
        raise InsufficientDataError(
            f"Insufficient points for decomposition: {n} < {2 * period_length} "
            f"(need at least 2x period_length)"
        )

    values = np.asarray(training.values, dtype=float)

    # extrapolate_trend=0 keeps the edges undefined instead of filling them
    result = seasonal_decompose(
        values,
        model="additive",
        period=period_length,
        two_sided=True,
        extrapolate_trend=0,
    )

    trend = np.asarray(result.trend, dtype=float)
    seasonal = np.asarray(result.seasonal, dtype=float)
    residual = np.asarray(result.resid, dtype=float)

    # Tiling starts at phase 0 on the first training point
    seasonal_pattern = seasonal[:period_length]

    n_defined = int(np.count_nonzero(~np.isnan(trend)))
    if n_defined < 2:
        raise InsufficientDataError(
            f"Only {n_defined} points have a defined trend after alignment"
        )

    logger.debug(
        "Series decomposed",
        n_points=n,
        period_length=period_length,
        n_trend_defined=n_defined,
        seasonal_range=round(float(np.ptp(seasonal_pattern)), 4),
    )

    return Decomposition(
        time_index=training.time_index,
        observed=values,
        seasonal=seasonal,
        trend=trend,
        residual=residual,
        period_length=period_length,
        seasonal_pattern=seasonal_pattern,
    )
