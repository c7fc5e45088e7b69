"""
Core utilities shared across the package.
"""

from .errors import InsufficientDataError, InvalidParameterError, SeasonalWatchError
from .logger import level_from_env, setup_logging

__all__ = [
    "InsufficientDataError",
    "InvalidParameterError",
    "SeasonalWatchError",
    "level_from_env",
    "setup_logging",
]
