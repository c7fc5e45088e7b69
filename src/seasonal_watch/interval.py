"""
Prediction intervals from residual variability.

half_width(h) = z(confidence_level) * sigma * growth(h)

sigma is the sample standard deviation of the defined residuals and z the
two-sided standard-normal quantile. The growth law sets how the interval widens
with the horizon step h.
"""

from collections.abc import Callable, Sequence

import numpy as np
import structlog
from scipy.stats import norm

from .core.errors import InsufficientDataError, InvalidParameterError
from .models import Bounds, Decomposition, ForecastPoint

logger = structlog.get_logger(__name__)


def _sqrt_growth(step: int) -> float:
    # Forecast errors accumulate like a random walk
    return float(np.sqrt(step))


def _constant_growth(step: int) -> float:
    return 1.0


def _linear_growth(step: int) -> float:
    return float(step)


# Registry of available growth laws, all non-decreasing in the step
GROWTH_REGISTRY: dict[str, Callable[[int], float]] = {
    "sqrt": _sqrt_growth,
    "constant": _constant_growth,
    "linear": _linear_growth,
}


def get_growth(name: str) -> Callable[[int], float]:
    """Look up a growth law by name

    Raises:
        InvalidParameterError: If name is not registered
    """
    if name not in GROWTH_REGISTRY:
        available = ", ".join(GROWTH_REGISTRY.keys())
        raise InvalidParameterError(f"Unknown interval growth '{name}'. Available: {available}")
    return GROWTH_REGISTRY[name]


def list_growths() -> list[str]:
    """List all available growth laws"""
    return list(GROWTH_REGISTRY.keys())


def z_score(confidence_level: float) -> float:
    """Two-sided standard-normal quantile (1.959964 for 0.95)

    Raises:
        InvalidParameterError: If confidence_level is not strictly between 0 and 1
    """
    if not 0.0 < confidence_level < 1.0:
        raise InvalidParameterError(
            f"confidence_level must be in (0, 1), got {confidence_level}"
        )
    return float(norm.ppf(0.5 + confidence_level / 2.0))


def residual_std(decomposition: Decomposition) -> float:
    """Sample standard deviation (ddof=1) of the defined residuals

    Raises:
        InsufficientDataError: If fewer than 2 residuals are defined
    """
    residuals = decomposition.defined_residuals()
    if len(residuals) < 2:
        raise InsufficientDataError(
            f"Need at least 2 defined residuals to estimate variability, got {len(residuals)}"
        )
    return float(np.std(residuals, ddof=1))


def half_width(sigma: float, confidence_level: float, step: int, growth: str = "sqrt") -> float:
    """Interval half-width z(confidence_level) * sigma * growth(step) for one step

    Raises:
        InvalidParameterError: If confidence_level is out of range or growth unknown
    """
    return z_score(confidence_level) * sigma * get_growth(growth)(step)


def bounds_for(
    forecast: Sequence[ForecastPoint],
    sigma: float,
    confidence_level: float,
    growth: str = "sqrt",
) -> tuple[Bounds, ...]:
    """Symmetric bounds around each point forecast for a known residual sigma

    Raises:
        InvalidParameterError: If confidence_level is out of range or growth unknown
    """
    z_score(confidence_level)
    get_growth(growth)

    bounds = []
    for point in forecast:
        width = half_width(sigma, confidence_level, point.step, growth)
        bounds.append(
            Bounds(
                lower_bound=point.point_forecast - width,
                upper_bound=point.point_forecast + width,
                half_width=width,
            )
        )

    logger.debug(
        "Prediction interval estimated",
        confidence_level=confidence_level,
        growth=growth,
        residual_std=round(sigma, 6),
        n_steps=len(bounds),
    )

    return tuple(bounds)


def interval(
    decomposition: Decomposition,
    forecast: Sequence[ForecastPoint],
    confidence_level: float,
    growth: str = "sqrt",
) -> tuple[Bounds, ...]:
    """Symmetric prediction interval around each point forecast

    Args:
        decomposition: Source of the residuals
        forecast: Point forecasts, one per horizon step
        confidence_level: Coverage probability, strictly between 0 and 1
        growth: Name of the growth law (see GROWTH_REGISTRY)

    Returns:
        One Bounds per forecast step, in order

    Raises:
        InvalidParameterError: If confidence_level is out of range or growth unknown
        InsufficientDataError: If residual variability cannot be estimated
    """
    # Parameter errors come before data errors
    z_score(confidence_level)
    get_growth(growth)
    return bounds_for(forecast, residual_std(decomposition), confidence_level, growth)
