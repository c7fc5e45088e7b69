"""
Training/holdout split of an observed series.
"""

import structlog

from .core.errors import InsufficientDataError, InvalidParameterError
from .models import Series

logger = structlog.get_logger(__name__)


def split(series: Series, horizon: int, period_length: int) -> tuple[Series, Series]:
    """Split a series into training (all but the last horizon points) and holdout

    Args:
        series: Observed series, oldest first
        horizon: Number of trailing observations to hold out
        period_length: Seasonal period the training part will be decomposed with

    Returns:
        (training, holdout) as new Series objects

    Raises:
        InvalidParameterError: If horizon < 1, period_length < 2, or the holdout
            would not be shorter than the training part
        InsufficientDataError: If the series is not longer than the horizon or
            holds fewer than two full periods
    """
    if horizon < 1:
        raise InvalidParameterError(f"horizon must be >= 1, got {horizon}")
    if period_length < 2:
        raise InvalidParameterError(f"period_length must be >= 2, got {period_length}")

    n = len(series)
    if n <= horizon:
        raise InsufficientDataError(f"Series of {n} points cannot hold out {horizon} points")
    if n < 2 * period_length:
        raise InsufficientDataError(
            f"Insufficient points: {n} < {2 * period_length} (need at least 2x period_length)"
        )

    n_training = n - horizon
    if horizon >= n_training:
        raise InvalidParameterError(
            f"horizon ({horizon}) must be shorter than the training part ({n_training})"
        )

    training = series.slice(None, n_training)
    holdout = series.slice(n_training, None)

    logger.debug(
        "Series split",
        n_points=n,
        n_training=len(training),
        n_holdout=len(holdout),
    )

    return training, holdout
