"""Command line interface.

Usage:
    rpimon check --pin 4
    rpimon serve --endpoint https://... --apikey ...

Every ``serve`` option can also be given through the environment (see
``rpimon.lib.config.Settings``); command line values win.
"""

import argparse
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from rpimon.dht.check import check
from rpimon.dht.polling import MonitoringService
from rpimon.graphite.submit import GraphiteSubmitter
from rpimon.lib.config import (
    Settings,
    get_settings,
    load_sensors,
    validate_serve_config,
)
from rpimon.lib.exceptions import ConfigurationError
from rpimon.logging import configure, get_logger, set_level

logger = get_logger("cli")


def _pin(value: str) -> int:
    pin = int(value)
    if not 0 <= pin <= 255:
        raise argparse.ArgumentTypeError(f"invalid GPIO pin: {value}")
    return pin


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpimon",
        description="RPi temperature monitoring service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Sample the sensors every REFRESH_TIME seconds (default: 15m) "
        "and send the data to a Graphite endpoint",
    )
    serve_parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=None,
        help="Debug flag (env: DEBUG)",
    )
    serve_parser.add_argument(
        "-r",
        "--refresh-time",
        type=int,
        help="How often to sample the sensors, in seconds (env: REFRESH_TIME, default: 900)",
    )
    serve_parser.add_argument(
        "-s",
        "--sensors-config-path",
        help="Path to the sensors configuration (env: SENSORS_CONFIG_PATH, default: sensors.yaml)",
    )
    serve_parser.add_argument(
        "-e",
        "--endpoint",
        help="Metrics API endpoint to POST to (env: GRAPHITE_ENDPOINT)",
    )
    serve_parser.add_argument(
        "-a",
        "--apikey",
        help="API key to authenticate the POST requests (env: GRAFANA_API_KEY)",
    )
    serve_parser.set_defaults(handler=serve)

    check_parser = subparsers.add_parser(
        "check",
        help="Read a sensor once (useful for debugging)",
    )
    check_parser.add_argument(
        "--pin",
        type=_pin,
        required=True,
        help="GPIO pin number the DHT22 sensor is connected to",
    )
    check_parser.set_defaults(handler=run_check)

    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, overridden by ``args``."""
    overrides: dict[str, Any] = {
        "debug": args.debug,
        "refresh_time": args.refresh_time,
        "sensors_config_path": args.sensors_config_path,
        "graphite_endpoint": args.endpoint,
        "grafana_api_key": args.apikey,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def serve(args: argparse.Namespace) -> int:
    settings = settings_from_args(args)
    set_level(settings.log_level)
    validate_serve_config(settings)
    sensors = load_sensors(settings.sensors_config_path)
    submitter = GraphiteSubmitter.from_settings(settings.graphite)
    MonitoringService(sensors, submitter, settings=settings).run()
    return 0


def run_check(args: argparse.Namespace) -> int:
    settings = get_settings()
    set_level(settings.log_level)
    return check(args.pin, settings)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    configure()
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (ConfigurationError, ValidationError) as e:
        logger.error("Exiting the application: %s", e)
        return 1
