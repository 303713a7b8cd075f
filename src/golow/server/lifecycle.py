"""Server lifecycle — bind, serve, drain, stop.

The listening socket is bound synchronously in ``Server.bind()`` so that
startup is observable (and a bind failure is fatal) before any event
loop runs. ``Server.serve()`` hands the socket to hypercorn and waits
for the shutdown trigger: SIGINT, or ``Server.shutdown()``.

States::

    STOPPED -> LISTENING -> DRAINING -> STOPPED
"""

from __future__ import annotations

import enum
import logging
import signal
import socket
from typing import TYPE_CHECKING

import anyio
from hypercorn.asyncio import serve as hypercorn_serve
from hypercorn.config import Config as HypercornConfig

from golow.config import ServerConfig
from golow.errors import ServerStartupError

if TYPE_CHECKING:
    from golow._internal.asgi import ASGIApp

logger = logging.getLogger("golow.server")

# Slack past the grace period before the serving task is cancelled outright
_FORCE_CLOSE_MARGIN = 1.0


class ServerState(enum.Enum):
    STOPPED = "stopped"
    LISTENING = "listening"
    DRAINING = "draining"


class Server:
    """Owns the listening socket and the serving lifecycle.

    Usage::

        server = Server(app, ServerConfig(port=8080))
        server.bind()          # raises ServerStartupError on failure
        anyio.run(server.serve)

    Only SIGINT triggers a graceful shutdown. SIGTERM, SIGQUIT and other
    signals keep their default disposition.
    """

    __slots__ = (
        "_address",
        "_drain_started",
        "_install_signal_handlers",
        "_shutdown_event",
        "_shutdown_requested",
        "_socket",
        "app",
        "config",
        "state",
    )

    def __init__(
        self,
        app: ASGIApp,
        config: ServerConfig | None = None,
        *,
        install_signal_handlers: bool = True,
    ) -> None:
        self.app = app
        self.config: ServerConfig = config or ServerConfig()
        self.state: ServerState = ServerState.STOPPED
        self._install_signal_handlers = install_signal_handlers
        self._socket: socket.socket | None = None
        self._address: tuple[str, int] | None = None
        self._shutdown_event: anyio.Event | None = None
        self._shutdown_requested = False
        self._drain_started: float | None = None

    @property
    def port(self) -> int:
        """The bound port. Differs from ``config.port`` when that is 0."""
        if self._address is None:
            msg = "Server is not bound."
            raise RuntimeError(msg)
        return self._address[1]

    @property
    def url(self) -> str:
        host = self._address[0] if self._address else self.config.host
        if host in {"0.0.0.0", "::", ""}:
            host = "127.0.0.1"
        return f"http://{host}:{self.port}"

    # -- Lifecycle --

    def bind(self) -> None:
        """Bind and listen. ``STOPPED -> LISTENING``.

        Connections made after this returns wait in the backlog until
        ``serve()`` starts accepting them.
        """
        if self.state is not ServerState.STOPPED:
            msg = f"Cannot bind a server in state {self.state.value!r}."
            raise RuntimeError(msg)

        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        try:
            sock = socket.create_server((host, port), family=family)
        except OSError as exc:
            logger.error("Failed to bind %s:%d: %s", host, port, exc)
            msg = f"Cannot listen on {host}:{port}: {exc.strerror or exc}"
            raise ServerStartupError(msg) from exc

        self._socket = sock
        self._address = sock.getsockname()[:2]
        self.state = ServerState.LISTENING
        logger.info("Server Started on %s:%d", self._address[0], self._address[1])

    def shutdown(self) -> None:
        """Request a graceful shutdown.

        Must be called from the serving event loop (or before ``serve()``).
        """
        self._shutdown_requested = True
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    async def serve(self) -> None:
        """Serve until shutdown is triggered, then drain and stop.

        Binds first if ``bind()`` has not been called. Returns normally
        whether the drain finished cleanly or the grace period ran out.
        """
        if self.state is ServerState.STOPPED:
            self.bind()

        assert self._socket is not None
        self._shutdown_event = anyio.Event()
        if self._shutdown_requested:
            self._shutdown_event.set()

        # hypercorn takes ownership of the descriptor and closes it
        fd = self._socket.detach()
        self._socket = None

        with anyio.CancelScope() as scope:
            await hypercorn_serve(
                self.app,
                self._hypercorn_config(fd),
                shutdown_trigger=lambda: self._wait_for_shutdown(scope),
                mode="asgi",
            )

        self._finish(forced=scope.cancelled_caught)

    def _hypercorn_config(self, fd: int) -> HypercornConfig:
        config = HypercornConfig()
        config.bind = [f"fd://{fd}"]
        config.graceful_timeout = self.config.graceful_timeout
        config.read_timeout = self.config.read_timeout
        config.accesslog = None
        config.errorlog = logger
        return config

    async def _wait_for_shutdown(self, scope: anyio.CancelScope) -> None:
        """hypercorn shutdown trigger. ``LISTENING -> DRAINING`` on return."""
        assert self._shutdown_event is not None

        async with anyio.create_task_group() as tg:
            if self._install_signal_handlers:
                tg.start_soon(self._watch_interrupt)
            await self._shutdown_event.wait()
            tg.cancel_scope.cancel()

        self.state = ServerState.DRAINING
        self._drain_started = anyio.current_time()
        # Hard stop in case connections outlive hypercorn's own grace period
        scope.deadline = self._drain_started + self.config.graceful_timeout + _FORCE_CLOSE_MARGIN
        logger.info(
            "Draining connections (grace period %.1fs)",
            self.config.graceful_timeout,
        )

    async def _watch_interrupt(self) -> None:
        with anyio.open_signal_receiver(signal.SIGINT) as signals:
            async for _signum in signals:
                logger.info("Received interrupt signal")
                self.shutdown()
                return

    def _finish(self, *, forced: bool) -> None:
        """``DRAINING -> STOPPED``."""
        elapsed = 0.0
        if self._drain_started is not None:
            elapsed = anyio.current_time() - self._drain_started

        if forced or elapsed >= self.config.graceful_timeout:
            logger.warning(
                "Grace period of %.1fs exceeded; remaining connections were closed",
                self.config.graceful_timeout,
            )

        self.state = ServerState.STOPPED
        logger.info("Shutting Down.")


def run_server(app: ASGIApp, config: ServerConfig | None = None) -> Server:
    """Bind, serve until SIGINT, drain, and return the stopped server.

    Raises ``ServerStartupError`` if the socket cannot be bound.
    """
    server = Server(app, config)
    server.bind()
    anyio.run(server.serve)
    return server
