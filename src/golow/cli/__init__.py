"""golow CLI — run the redirect server.

Entry point registered as ``golow`` in ``pyproject.toml``::

    [project.scripts]
    golow = "golow.cli:main"
"""

import argparse
import logging

from golow.cli._duration import duration_arg

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="golow",
        description="golow — lightweight HTTP server that redirects requests by path rules.",
    )
    parser.add_argument(
        "--graceful-timeout",
        type=duration_arg,
        default=15.0,
        metavar="DURATION",
        help=(
            "the duration for which the server gracefully waits for existing "
            "connections to finish - e.g. 15s or 1m (default: 15s)"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="JSON redirect rules file (default: built-in rules)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=LOG_LEVELS,
        help="Log level (default: info)",
    )
    return parser


def configure_logging(level: str) -> None:
    """Install the process-wide log handler: one timestamped line per record."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``golow`` command.

    Exits 1 on a configuration error or bind failure. After an interrupt
    the server drains and ``main`` returns normally (exit status 0).
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    from golow.cli._run import run

    run(args)
