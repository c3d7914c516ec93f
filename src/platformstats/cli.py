"""Command-line entry point for platformstats."""

import argparse
import logging
import sys

from platformstats.config import StatsConfig, load_config
from platformstats.errors import ConfigError
from platformstats.report import (
    ALL_REPORTERS,
    print_cma_utilization,
    print_cpu_frequency,
    print_cpu_utilization,
    print_power_utilization,
    print_ram_memory_utilization,
    print_swap_memory_utilization,
    run_reporters,
)

logger = logging.getLogger(__name__)

# (flags, dest, reporter, help) in report order
SELECTORS = [
    (("-c", "--cpu-util"), "cpu_util", print_cpu_utilization, "print CPU utilization"),
    (("-r", "--ram-util"), "ram_util", print_ram_memory_utilization, "print RAM utilization"),
    (("-s", "--swap-util"), "swap_util", print_swap_memory_utilization, "print swap utilization"),
    (("-p", "--power-util"), "power_util", print_power_utilization, "print power and thermal sensors"),
    (("-m", "--cma-util"), "cma_util", print_cma_utilization, "print CMA utilization"),
    (("-f", "--cpu-freq"), "cpu_freq", print_cpu_frequency, "print CPU frequency"),
]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="platformstats",
        description="Print platform statistics: CPU, memory, CMA, power and thermal sensors.",
    )
    parser.add_argument("-a", "--all", action="store_true", help="print every statistic (default)")
    for flags, dest, _, help_text in SELECTORS:
        parser.add_argument(*flags, dest=dest, action="store_true", help=help_text)
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output and debug logging")
    parser.add_argument("--rate", type=float, help="seconds between power samples (default 1)")
    parser.add_argument(
        "--duration",
        type=int,
        help="number of power samples, also the moving-average window (default 1)",
    )
    parser.add_argument("--config", metavar="FILE", help="TOML configuration file")
    parser.add_argument("--tui", action="store_true", help="open the interactive viewer")
    return parser


def setup_logging(verbose: bool) -> None:
    """Configure logging to stderr; verbose enables DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def resolve_config(args: argparse.Namespace) -> StatsConfig:
    """Load the config file, if any, and apply command-line overrides."""
    config = load_config(args.config) if args.config else StatsConfig()
    return config.with_overrides(rate=args.rate, duration=args.duration)


def selected_reporters(args: argparse.Namespace) -> list:
    """Reporters chosen on the command line, in report order."""
    chosen = [reporter for _, dest, reporter, _ in SELECTORS if getattr(args, dest)]
    if args.all or not chosen:
        return list(ALL_REPORTERS)
    return chosen


def main(argv: list[str] | None = None) -> int:
    """Run the selected reporters and return the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = resolve_config(args)
    except ConfigError as e:
        logger.error("%s", e)
        return e.exit_code

    if args.tui:
        from platformstats.app import PlatformStatsApp

        PlatformStatsApp(config).run()
        return 0

    return run_reporters(selected_reporters(args), config, args.verbose)


if __name__ == "__main__":
    sys.exit(main())
