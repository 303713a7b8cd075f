"""ASGI handler — translates ASGI scope/messages to golow types.

The only component that touches raw ASGI messages. Converts the scope
to a typed Request, dispatches through the router (or the fallback),
and sends the redirect back through ASGI send(). WebSocket upgrade
requests get the same redirect as an HTTP denial response.
"""

import html
import logging
from http import HTTPStatus
from urllib.parse import quote

from golow._internal.asgi import Receive, Scope, Send
from golow.errors import NotFound
from golow.http.request import Request
from golow.http.response import Redirect, Response
from golow.redirect import RedirectHandler
from golow.routing.router import Router
from golow.server.sender import send_response

logger = logging.getLogger("golow.server")

# Reserved URL characters and "%", so existing escapes are kept as they are
_URL_SAFE = ":/?#[]@!$&'()*+,;=%~"


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    fallback: RedirectHandler,
    write_timeout: float | None = None,
) -> None:
    """Process a single HTTP or WebSocket request: match, redirect, send."""
    scope_type = scope["type"]
    if scope_type not in {"http", "websocket"}:
        return

    request = Request.from_asgi(scope)

    try:
        match = router.match(request.path)
    except NotFound:
        redirect = fallback(request)
    else:
        redirect = match.route.handler(request)

    response = redirect_response(redirect, request.method)

    if scope_type == "websocket":
        await _deny_websocket(scope, receive, send, response, write_timeout)
        return

    await send_response(
        response,
        send,
        method=request.method,
        write_timeout=write_timeout,
    )


async def _deny_websocket(
    scope: Scope,
    receive: Receive,
    send: Send,
    response: Response,
    write_timeout: float | None,
) -> None:
    """Answer a WebSocket handshake with the redirect instead of accepting it.

    Uses the ASGI ``websocket.http.response`` extension. Servers without
    it reject the handshake with 403 when the socket is closed unaccepted.
    """
    message = await receive()
    if message["type"] != "websocket.connect":
        return
    if "websocket.http.response" not in scope.get("extensions", {}):
        logger.debug("Server lacks websocket.http.response; closing %s", scope["path"])
        await send({"type": "websocket.close", "code": 1000})
        return
    await send_response(response, send, write_timeout=write_timeout, websocket=True)


def redirect_response(redirect: Redirect, method: str = "GET") -> Response:
    """Render a Redirect as a Response with a ``Location`` header.

    The target is percent-encoded so the header stays ASCII. GET and
    HEAD requests also get a short HTML body linking to the target;
    the sender drops it for HEAD.
    """
    url = quote(redirect.url, safe=_URL_SAFE)
    status = int(redirect.status)
    body = ""
    if method in {"GET", "HEAD"}:
        body = f'<a href="{html.escape(url)}">{HTTPStatus(status).phrase}</a>.\n'
    return Response(body=body, status=status, headers=(("Location", url),))
