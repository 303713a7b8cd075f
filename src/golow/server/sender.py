"""ASGI response sending — translates golow Response types to ASGI messages."""

import logging

import anyio

from golow._internal.asgi import Send
from golow.http.response import Response

logger = logging.getLogger("golow.server")


def _body_allowed(status: int, method: str) -> bool:
    """Whether a response to *method* with *status* may carry a body."""
    # RFC: 1xx, 204, and 304 responses and HEAD replies do not include a message body.
    if method == "HEAD":
        return False
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(
    response: Response,
    send: Send,
    *,
    method: str = "GET",
    write_timeout: float | None = None,
    websocket: bool = False,
) -> None:
    """Translate a golow Response into ASGI send() calls.

    With *websocket* set the messages are the ``websocket.http.response``
    denial pair, sent in place of accepting the handshake.

    When *write_timeout* is set, each send() is bounded by it and a
    ``TimeoutError`` propagates to the server, which drops the connection.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status, method) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    prefix = "websocket.http.response" if websocket else "http.response"
    messages = (
        {
            "type": f"{prefix}.start",
            "status": int(response.status),
            "headers": raw_headers,
        },
        {
            "type": f"{prefix}.body",
            "body": body,
        },
    )
    for message in messages:
        if write_timeout is None:
            await send(message)
            continue
        try:
            with anyio.fail_after(write_timeout):
                await send(message)
        except TimeoutError:
            logger.warning("Write timed out after %.1fs; dropping connection", write_timeout)
            raise
