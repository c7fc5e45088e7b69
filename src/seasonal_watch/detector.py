"""
Anomaly flags for holdout observations.

An observation is anomalous iff it lies strictly outside its prediction interval.
A value sitting on a bound, up to floating-point noise, is not an anomaly.
"""

from collections.abc import Sequence

import numpy as np
import structlog

from .core.errors import InvalidParameterError
from .models import Bounds, ForecastPoint, HoldoutPoint, Series

logger = structlog.get_logger(__name__)

# A value within this many ULPs of a bound counts as sitting on it
BOUND_ULPS = 4096


def _on_bound(value: float, bound: float) -> bool:
    return abs(value - bound) <= BOUND_ULPS * np.spacing(max(abs(value), abs(bound)))


def _outside(value: float, lower: float, upper: float) -> bool:
    if _on_bound(value, lower) or _on_bound(value, upper):
        return False
    return value < lower or value > upper


def flag(
    holdout: Series, forecast: Sequence[ForecastPoint], bounds: Sequence[Bounds]
) -> tuple[HoldoutPoint, ...]:
    """Compare holdout values against forecast +/- interval

    Args:
        holdout: Observed values for the forecast horizon
        forecast: Point forecasts aligned with holdout
        bounds: Interval bounds aligned with holdout

    Returns:
        One HoldoutPoint per holdout observation, in order

    Raises:
        InvalidParameterError: If the three inputs differ in length
    """
    if not len(holdout) == len(forecast) == len(bounds):
        raise InvalidParameterError(
            f"Length mismatch: {len(holdout)} holdout, {len(forecast)} forecast, "
            f"{len(bounds)} bounds"
        )

    points = []
    for observation, predicted, bound in zip(holdout, forecast, bounds):
        points.append(
            HoldoutPoint(
                time_index=observation.time_index,
                actual=observation.value,
                point_forecast=predicted.point_forecast,
                lower_bound=bound.lower_bound,
                upper_bound=bound.upper_bound,
                is_anomaly=bool(
                    _outside(observation.value, bound.lower_bound, bound.upper_bound)
                ),
            )
        )

    n_anomalies = sum(point.is_anomaly for point in points)
    if n_anomalies:
        logger.info("Anomalies flagged", n_anomalies=n_anomalies, n_points=len(points))
    else:
        logger.debug("No anomalies flagged", n_points=len(points))

    return tuple(points)
