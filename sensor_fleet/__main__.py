"""CLI entry point for the Sensor Fleet Simulator.

Usage::

    sensor-fleet run --num-sensors 100 --min-rate 2 --max-rate 8
    sensor-fleet run -p console --num-sensors 3 --duration 10
    sensor-fleet run --config config.yaml
    sensor-fleet list-kinds
    sensor-fleet list-publishers
    sensor-fleet init-config --output config.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import textwrap
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sensor_fleet.publishers.base import Publisher
    from sensor_fleet.supervisor import SimulationSupervisor

logger = logging.getLogger("sensor_fleet.cli")

# ---------------------------------------------------------------------------
# Extras mapping for list-publishers display
# ---------------------------------------------------------------------------
_PUBLISHER_EXTRAS: dict[str, str | None] = {
    "redis": None,
    "console": None,
    "callback": None,
    "kafka": "kafka",
}

# ---------------------------------------------------------------------------
# Sample YAML config template for init-config
# ---------------------------------------------------------------------------
_SAMPLE_CONFIG = """\
# Sensor Fleet Simulator configuration
# Every key set here overrides the matching command-line flag.

num-sensors: 1000                     # number of simulated sensors
min-rate: 4.0                         # lowest per-sensor publish rate (Hz)
max-rate: 4.0                         # highest per-sensor publish rate (Hz)
# kinds: [temperature, pressure, humidity]   # sensor i publishes on kinds[i % len(kinds)]
# duration_s: 60                      # optional: auto-stop after N seconds
# log_level: INFO                     # DEBUG, INFO, WARNING, ERROR

publisher:
  type: redis
  url: redis://localhost:6379/0

# publisher:
#   type: kafka
#   bootstrap_servers: localhost:9092
#   topic_prefix: "sensors."

# publisher:
#   type: console
"""


# ======================================================================
# Main entry point
# ======================================================================


def main(argv: list[str] | None = None) -> None:
    epilog = textwrap.dedent("""\
        examples:
          sensor-fleet run --num-sensors 100 --min-rate 2 --max-rate 8
          sensor-fleet run -p console --num-sensors 3 --duration 10
          sensor-fleet run --config config.yaml
          sensor-fleet list-kinds
          sensor-fleet list-publishers
          sensor-fleet init-config --output config.yaml
    """)

    parser = argparse.ArgumentParser(
        prog="sensor-fleet",
        description="Simulate a fleet of sensors publishing readings to pub/sub channels.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", title="commands")

    # -- run ---------------------------------------------------------------
    run_parser = subparsers.add_parser(
        "run",
        help="Run the simulator until interrupted (Ctrl-C) or --duration elapses.",
    )
    run_parser.add_argument(
        "--num-sensors",
        "-n",
        type=int,
        default=1000,
        help="Number of sensors to simulate (default: 1000).",
    )
    run_parser.add_argument(
        "--min-rate",
        type=float,
        default=4.0,
        help="Minimum publish rate in Hz (default: 4.0).",
    )
    run_parser.add_argument(
        "--max-rate",
        type=float,
        default=4.0,
        help="Maximum publish rate in Hz (default: 4.0).",
    )
    run_parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML config file (default: ./config.yaml if present). File values override flags.",
    )
    run_parser.add_argument(
        "--publisher",
        "-p",
        type=str,
        default="redis",
        choices=["redis", "kafka", "console"],
        help="Publisher to use when the config file has no 'publisher' section (default: redis).",
    )
    run_parser.add_argument(
        "--redis-url",
        type=str,
        default="redis://localhost:6379/0",
        help="Redis URL for the redis publisher (default: redis://localhost:6379/0).",
    )
    run_parser.add_argument(
        "--bootstrap-servers",
        type=str,
        default="localhost:9092",
        help="Kafka brokers for the kafka publisher (default: localhost:9092).",
    )
    run_parser.add_argument(
        "--duration",
        "-d",
        type=float,
        default=None,
        help="Run duration in seconds (default: indefinite, Ctrl-C to stop).",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Base random seed for reproducible runs (default: seeded from the clock).",
    )
    run_parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )

    # -- list-kinds --------------------------------------------------------
    subparsers.add_parser(
        "list-kinds",
        help="List the measurement kinds, their channels and value ranges.",
    )

    # -- list-publishers ---------------------------------------------------
    subparsers.add_parser(
        "list-publishers",
        help="List all available publisher types and install instructions.",
    )

    # -- init-config -------------------------------------------------------
    init_parser = subparsers.add_parser(
        "init-config",
        help="Generate a sample YAML configuration file.",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write config to this file instead of stdout.",
    )

    # If the first arg is a flag rather than a subcommand (e.g.
    # ``sensor-fleet --num-sensors 10``), treat it as ``run``.
    _known_commands = {"run", "list-kinds", "list-publishers", "init-config"}
    raw_args = argv if argv is not None else sys.argv[1:]
    if raw_args and raw_args[0] not in _known_commands and raw_args[0] not in ("-h", "--help"):
        raw_args = ["run", *list(raw_args)]

    args = parser.parse_args(raw_args)

    if args.command is None:
        parser.print_help()
        return

    # -- Dispatch ----------------------------------------------------------
    if args.command == "run":
        _cmd_run(args)
    elif args.command == "list-kinds":
        _cmd_list_kinds()
    elif args.command == "list-publishers":
        _cmd_list_publishers()
    elif args.command == "init-config":
        _cmd_init_config(args.output)
    else:
        parser.print_help()


# ======================================================================
# Command implementations
# ======================================================================


def _cmd_run(args: argparse.Namespace) -> None:
    """Resolve parameters, build the publisher and run the fleet.

    Exits with status 1 on configuration errors, before any sensor starts.
    """
    from sensor_fleet.config import ConfigurationError, resolve_parameters
    from sensor_fleet.publishers.factory import create_publisher
    from sensor_fleet.supervisor import SimulationSupervisor

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)-30s %(levelname)-7s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        params, file_cfg = resolve_parameters(
            sensor_count=args.num_sensors,
            min_rate=args.min_rate,
            max_rate=args.max_rate,
            config_path=args.config,
        )
        if file_cfg.log_level:
            logging.getLogger().setLevel(file_cfg.log_level)

        publisher_cfg = file_cfg.publisher or _publisher_config_from_args(args)
        try:
            publisher = create_publisher(publisher_cfg)
        except (ValueError, TypeError, ImportError) as exc:
            raise ConfigurationError(f"Cannot create publisher: {exc}") from exc

        supervisor = SimulationSupervisor(params, publisher, seed=args.seed)
    except ConfigurationError as exc:
        logger.error("Error: %s", exc)
        sys.exit(1)

    duration = args.duration if args.duration is not None else file_cfg.duration_s
    try:
        asyncio.run(_serve(supervisor, publisher, duration))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as exc:
        logger.error("Error: simulator failed: %s", exc)
        sys.exit(1)


async def _serve(supervisor: SimulationSupervisor, publisher: Publisher, duration_s: float | None) -> None:
    """Connect the publisher, run the supervisor, and always close the publisher."""
    await publisher.connect()
    try:
        await supervisor.run_async(duration_s=duration_s)
    finally:
        await publisher.close()


def _publisher_config_from_args(args: argparse.Namespace) -> dict[str, str]:
    if args.publisher == "redis":
        return {"type": "redis", "url": args.redis_url}
    if args.publisher == "kafka":
        return {"type": "kafka", "bootstrap_servers": args.bootstrap_servers}
    return {"type": args.publisher}


# -- list-kinds -------------------------------------------------------------


def _cmd_list_kinds() -> None:
    from sensor_fleet.generators import ValueGenerator
    from sensor_fleet.models import DEFAULT_KINDS

    print(f"\n{'Index mod 3':<12} {'Kind / channel':<16} {'Min':>8} {'Max':>8}")
    print("-" * 47)
    for position, kind in enumerate(DEFAULT_KINDS):
        low, high = ValueGenerator.value_range(kind)
        print(f"{position:<12} {kind:<16} {low:>8.2f} {high:>8.2f}")
    print()


# -- list-publishers ----------------------------------------------------------


def _cmd_list_publishers() -> None:
    from sensor_fleet.publishers.factory import PUBLISHER_TYPES

    print(f"\n{'Publisher':<12} {'Class':<20} {'Install Extra'}")
    print("-" * 62)
    for name, target in PUBLISHER_TYPES.items():
        class_name = target.rpartition(":")[2]
        extra = _PUBLISHER_EXTRAS.get(name)
        extra_str = "(built-in)" if extra is None else f"pip install sensor-fleet-simulator[{extra}]"
        print(f"{name:<12} {class_name:<20} {extra_str}")
    print()


# -- init-config ------------------------------------------------------------


def _cmd_init_config(output_path: str | None) -> None:
    if output_path:
        from pathlib import Path

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(_SAMPLE_CONFIG)
        print(f"Sample config written to {output_path}")
    else:
        print(_SAMPLE_CONFIG)


# ======================================================================
if __name__ == "__main__":
    main()
