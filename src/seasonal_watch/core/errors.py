"""
Error types raised by the forecasting pipeline.

Every error subclasses ValueError: all of them describe an input that cannot be
analyzed as given (too short, or parameters out of range).
"""


class SeasonalWatchError(ValueError):
    """Base class for all seasonal_watch errors"""


class InsufficientDataError(SeasonalWatchError):
    """The series is too short for the requested period or horizon, or a stage
    is left with too few defined points to estimate from."""


class InvalidParameterError(SeasonalWatchError):
    """A parameter (period, horizon, confidence level, growth law) or the series
    itself is malformed."""
