"""
CLI for checking the last days of a metric against its seasonal forecast.

Usage:
    python -m seasonal_watch.cli --input metrics.csv [options]
"""

import argparse
import json
import os
import sys

import pandas as pd
import structlog
from dotenv import load_dotenv

from .core.errors import SeasonalWatchError
from .core.logger import LOG_LEVELS, level_from_env, setup_logging
from .interval import list_growths
from .models import PipelineConfig, PipelineResult, Series
from .pipeline import SeasonalAnomalyPipeline

logger = structlog.get_logger(__name__)


def parse_arguments(argv: list[str] | None = None):
    """Parse command-line arguments"""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Flag the last observations of a periodic metric that fall outside "
        "their seasonal forecast interval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Last 7 days of a daily metric, weekly seasonality
        python -m seasonal_watch.cli --input sessions.csv

        # Custom columns and a flat interval
        python -m seasonal_watch.cli --input sessions.csv \\
            --date-column day --value-column sessions \\
            --growth constant --confidence 0.99 --output result.json
        """,
    )

    # Input
    parser.add_argument("--input", required=True, help="CSV file with one row per observation")
    parser.add_argument(
        "--date-column",
        default="date",
        help="Column holding the observation date (default: date)",
    )
    parser.add_argument(
        "--value-column",
        default="value",
        help="Column holding the observed value (default: value)",
    )

    # Pipeline parameters
    parser.add_argument(
        "--period",
        type=int,
        default=int(os.getenv("SEASONAL_PERIOD", "7")),
        help="Seasonal period length (default: 7 or SEASONAL_PERIOD env var)",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=int(os.getenv("FORECAST_HORIZON", "7")),
        help="Number of trailing observations to check (default: 7 or FORECAST_HORIZON env var)",
    )
    parser.add_argument(
        "--confidence",
        type=float,
        default=float(os.getenv("CONFIDENCE_LEVEL", "0.95")),
        help="Prediction interval confidence level (default: 0.95 or CONFIDENCE_LEVEL env var)",
    )
    parser.add_argument(
        "--growth",
        default=os.getenv("INTERVAL_GROWTH", "sqrt"),
        choices=list_growths(),
        help="How the interval widens with the horizon (default: sqrt)",
    )

    # Output
    parser.add_argument("--output", help="Write the JSON result to this file (default: stdout)")

    # Logging
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS.keys()),
        default=None,
        help="Logging level (default: LOG_LEVEL env var or INFO)",
    )

    return parser.parse_args(argv)


def build_config(args) -> PipelineConfig:
    """Build configuration from arguments"""
    return PipelineConfig(
        period_length=args.period,
        horizon=args.horizon,
        confidence_level=args.confidence,
        interval_growth=args.growth,
    )


def load_series(path: str, date_column: str, value_column: str) -> Series:
    """Read a CSV file into a Series"""
    df = pd.read_csv(path, parse_dates=[date_column])
    logger.debug("Input loaded", path=path, rows=len(df))
    return Series.from_frame(df, time_column=date_column, value_column=value_column)


def write_result(result: PipelineResult, output: str | None) -> None:
    payload = json.dumps(result.to_dict(), indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info("Result written", path=output)
    else:
        print(payload)


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = parse_arguments(argv)

    log_level = LOG_LEVELS[args.log_level] if args.log_level else level_from_env()
    setup_logging(level=log_level)

    try:
        series = load_series(args.input, args.date_column, args.value_column)
        result = SeasonalAnomalyPipeline(build_config(args)).run(series)
    except SeasonalWatchError as e:
        logger.error("Analysis failed", error_type=type(e).__name__, error=str(e))
        return 1
    except (OSError, ValueError) as e:
        # Missing file, missing date column or unparseable CSV
        logger.error("Could not read input", path=args.input, error=str(e))
        return 1

    for point in result.anomalies:
        logger.warning(
            "Anomalous observation",
            time_index=point.time_index,
            actual=round(point.actual, 4),
            expected=round(point.point_forecast, 4),
            direction=point.direction,
        )

    write_result(result, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
