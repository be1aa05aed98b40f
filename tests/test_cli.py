"""Tests for the command line interface."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from rpimon.cli import build_parser, main, settings_from_args
from rpimon.lib.config import Settings
from rpimon.lib.config.testing import set_settings


@pytest.fixture(autouse=True)
def no_log_handlers():
    """Leave log handler setup to caplog."""
    with patch("rpimon.cli.configure"):
        yield


class TestParser:
    """Tests for argument parsing."""

    def test_check_requires_pin(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check"])

    def test_check_rejects_invalid_pin(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check", "--pin", "300"])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_serve_options(self):
        args = build_parser().parse_args(
            ["serve", "-d", "-r", "60", "-s", "s.yaml", "-e", "https://x.io", "-a", "k"]
        )

        assert args.debug is True
        assert args.refresh_time == 60
        assert args.sensors_config_path == "s.yaml"
        assert args.endpoint == "https://x.io"
        assert args.apikey == "k"


class TestSettingsFromArgs:
    """Tests for merging command line values with the environment."""

    @patch.dict(
        "os.environ",
        {
            "REFRESH_TIME": "300",
            "GRAPHITE_ENDPOINT": "https://env.example.com/metrics",
            "GRAFANA_API_KEY": "env-key",
        },
        clear=True,
    )
    def test_env_used_when_not_given(self):
        args = build_parser().parse_args(["serve"])

        settings = settings_from_args(args)

        assert settings.refresh_time == 300
        assert settings.graphite_endpoint == "https://env.example.com/metrics"
        assert settings.debug is False

    @patch.dict(
        "os.environ",
        {"REFRESH_TIME": "300", "GRAPHITE_ENDPOINT": "https://env.example.com/metrics"},
        clear=True,
    )
    def test_command_line_wins(self):
        args = build_parser().parse_args(
            ["serve", "-r", "60", "-e", "https://cli.example.com/metrics", "-s", "x.yaml"]
        )

        settings = settings_from_args(args)

        assert settings.refresh_time == 60
        assert settings.graphite_endpoint == "https://cli.example.com/metrics"
        assert settings.sensors_config_path == Path("x.yaml")


class TestMain:
    """Tests for the main entry point."""

    @patch.dict("os.environ", {}, clear=True)
    def test_serve_without_endpoint_exits_with_error(self, caplog):
        assert main(["serve"]) == 1
        assert "GRAPHITE_ENDPOINT" in caplog.text

    @patch.dict("os.environ", {}, clear=True)
    def test_serve_with_missing_sensors_file_exits_with_error(self, tmp_path, caplog):
        code = main(
            [
                "serve",
                "-e",
                "https://graphite.example.com/metrics",
                "-a",
                "key",
                "-s",
                str(tmp_path / "missing.yaml"),
            ]
        )

        assert code == 1
        assert "not found" in caplog.text

    @patch.dict("os.environ", {}, clear=True)
    def test_serve_with_invalid_refresh_time_exits_with_error(self):
        assert main(["serve", "-r", "0", "-e", "https://x.io", "-a", "k"]) == 1

    @patch.dict("os.environ", {}, clear=True)
    def test_serve_runs_monitoring_service(self, tmp_path):
        sensors_file = tmp_path / "sensors.yaml"
        sensors_file.write_text("- name: A\n  pin: 4\n")

        with patch("rpimon.cli.MonitoringService") as mock_service:
            code = main(
                [
                    "serve",
                    "-e",
                    "https://graphite.example.com/metrics",
                    "-a",
                    "key",
                    "-s",
                    str(sensors_file),
                    "-r",
                    "60",
                ]
            )

        assert code == 0
        sensors, submitter = mock_service.call_args.args
        assert [s.name for s in sensors] == ["A"]
        assert mock_service.call_args.kwargs["settings"].refresh_time == 60
        mock_service.return_value.run.assert_called_once()

    def test_check_dispatches(self, settings):
        with patch("rpimon.cli.check", return_value=0) as mock_check:
            assert main(["check", "--pin", "4"]) == 0

        mock_check.assert_called_once_with(4, settings)

    def test_check_applies_configured_log_level(self):
        set_settings(Settings(_env_file=None, log_level="warning"))

        with patch("rpimon.cli.check", return_value=0):
            main(["check", "--pin", "4"])

        assert logging.getLogger("rpimon").level == logging.WARNING
