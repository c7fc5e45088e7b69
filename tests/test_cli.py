"""
Tests for the command-line adapter.
"""

import json
from unittest.mock import patch

import pandas as pd
import pytest
from structlog.testing import capture_logs

from seasonal_watch.cli import build_config, main, parse_arguments

WEEKLY_PATTERN = [100.0, 100.0, 100.0, 100.0, 100.0, 50.0, 50.0]


@pytest.fixture
def metrics_csv(tmp_path):
    """Seven weeks of a daily metric, the last Wednesday collapsing to 10."""
    values = WEEKLY_PATTERN * 7
    values[44] = 10.0
    df = pd.DataFrame(
        {"day": pd.date_range("2024-01-01", periods=len(values), freq="D"), "sessions": values}
    )
    path = tmp_path / "metrics.csv"
    df.to_csv(path, index=False)
    return path


@patch("seasonal_watch.cli.load_dotenv")
class TestArguments:
    """Tests for argument parsing."""

    def test_defaults(self, mock_dotenv):
        """Test default pipeline parameters."""
        with patch.dict("os.environ", {}, clear=True):
            args = parse_arguments(["--input", "data.csv"])

        config = build_config(args)
        assert config.period_length == 7
        assert config.horizon == 7
        assert config.confidence_level == 0.95
        assert config.interval_growth == "sqrt"
        assert args.date_column == "date"
        assert args.value_column == "value"

    def test_environment_defaults(self, mock_dotenv):
        """Test that environment variables provide defaults."""
        env = {"SEASONAL_PERIOD": "4", "FORECAST_HORIZON": "3", "CONFIDENCE_LEVEL": "0.8"}
        with patch.dict("os.environ", env, clear=True):
            args = parse_arguments(["--input", "data.csv"])

        config = build_config(args)
        assert config.period_length == 4
        assert config.horizon == 3
        assert config.confidence_level == 0.8

    def test_explicit_arguments(self, mock_dotenv):
        """Test command-line values."""
        args = parse_arguments(
            ["--input", "data.csv", "--period", "12", "--horizon", "2", "--growth", "constant"]
        )

        config = build_config(args)
        assert config.period_length == 12
        assert config.horizon == 2
        assert config.interval_growth == "constant"


@patch("seasonal_watch.cli.setup_logging")
class TestMain:
    """Tests for main()."""

    def test_writes_result_file(self, mock_logging, metrics_csv, tmp_path):
        """Test a full run writing JSON to a file."""
        output = tmp_path / "result.json"

        exit_code = main(
            [
                "--input",
                str(metrics_csv),
                "--date-column",
                "day",
                "--value-column",
                "sessions",
                "--output",
                str(output),
            ]
        )

        assert exit_code == 0
        mock_logging.assert_called_once()
        data = json.loads(output.read_text())
        assert data["anomaly_count"] == 1
        assert [p["is_anomaly"] for p in data["points"]].index(True) == 2
        assert data["points"][2]["direction"] == "below"

    def test_prints_to_stdout(self, mock_logging, metrics_csv, capsys):
        """Test that the result goes to stdout without --output."""
        with capture_logs() as logs:
            exit_code = main(
                ["--input", str(metrics_csv), "--date-column", "day", "--value-column", "sessions"]
            )

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["points"]) == 7

        warnings = [log for log in logs if log["event"] == "Anomalous observation"]
        assert len(warnings) == 1
        assert warnings[0]["direction"] == "below"

    def test_missing_file(self, mock_logging, tmp_path):
        """Test that an unreadable input exits with 1."""
        assert main(["--input", str(tmp_path / "missing.csv")]) == 1

    def test_missing_column(self, mock_logging, metrics_csv):
        """Test that a wrong column name exits with 1."""
        assert main(["--input", str(metrics_csv), "--date-column", "day"]) == 1

    def test_insufficient_data(self, mock_logging, tmp_path):
        """Test that a too-short series exits with 1."""
        df = pd.DataFrame(
            {"date": pd.date_range("2024-01-01", periods=10, freq="D"), "value": range(10)}
        )
        path = tmp_path / "short.csv"
        df.to_csv(path, index=False)

        assert main(["--input", str(path), "--horizon", "3"]) == 1
