"""golow application class.

Built from an immutable Config. The router is compiled on first use
(lifespan startup or first request) and never changes afterwards.
"""

import logging
import threading

from golow._internal.asgi import Receive, Scope, Send
from golow.config import Config, default_config
from golow.redirect import RedirectHandler, fallback_to, redirect_to
from golow.routing.route import Route
from golow.routing.router import Router
from golow.server.handler import handle_request

logger = logging.getLogger("golow.server")


class App:
    """The redirect application: rule table, router, ASGI entry point.

    Thread safety:
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread compiles the router. After that every request only
        reads immutable state.
    """

    __slots__ = (
        "_fallback",
        "_freeze_lock",
        "_frozen",
        "_router",
        "config",
        "write_timeout",
    )

    def __init__(
        self,
        config: Config | None = None,
        *,
        write_timeout: float | None = None,
    ) -> None:
        self.config: Config = config or default_config()
        self.write_timeout = write_timeout
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._fallback: RedirectHandler | None = None

    @property
    def router(self) -> Router:
        """The compiled router (compiles on first access)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP and
        WebSocket scopes to the redirect handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None
        assert self._fallback is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            fallback=self._fallback,
            write_timeout=self.write_timeout,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Compiles the router at startup, before the first HTTP request.
        A bad route pattern fails startup instead of the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the rule table into the router.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for rule in self.config.redirects:
            if not rule.is_valid:
                logger.debug("Skipping rule with empty path or url: %r", rule)
                continue
            router.add(
                Route(
                    path=rule.path,
                    handler=redirect_to(rule.url, rule.options),
                    name=rule.url,
                )
            )
        router.compile()

        self._router = router
        self._fallback = fallback_to(self.config.default_redirect)
        self._frozen = True
