"""``golow`` — load config, build the app, serve until interrupted."""

import argparse
import logging
import sys

from golow.app import App
from golow.config import ServerConfig, load
from golow.errors import ConfigurationError, ServerStartupError
from golow.server.lifecycle import run_server

logger = logging.getLogger("golow.server")


def run(args: argparse.Namespace) -> None:
    """Start the redirect server with the parsed CLI arguments."""
    try:
        config = load(args.config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    server_config = ServerConfig(graceful_timeout=args.graceful_timeout)
    app = App(config, write_timeout=server_config.write_timeout)

    try:
        routes = app.router.routes
        logger.info("Registered %d redirect rules", len(routes))
        run_server(app, server_config)
    except (ConfigurationError, ServerStartupError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
