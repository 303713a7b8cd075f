"""Async test client for golow applications.

Drives the ASGI interface directly, no sockets involved. Responses come
back as the same ``Response`` type the app builds.
"""

from __future__ import annotations

from typing import Any

from golow.app import App
from golow.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for golow applications.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/go")
            assert response.status == 307
            assert response.location == "https://golang.org"
    """

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str) -> Response:
        return await self.request("GET", path)

    async def head(self, path: str) -> Response:
        return await self.request("HEAD", path)

    async def request(self, method: str, path: str) -> Response:
        """Send *method* to *path* (which may carry a query string)."""
        path_part, _, query_string = path.partition("?")
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("utf-8"),
            "query_string": query_string.encode("latin-1"),
            "headers": [],
            "client": ("127.0.0.1", 0),
        }
        messages: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "http.disconnect"}

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        await self.app(scope, receive, send)
        return _collect(messages)


def _collect(messages: list[dict[str, Any]]) -> Response:
    """Fold captured ``http.response.*`` messages into a Response."""
    start = next(m for m in messages if m["type"] == "http.response.start")
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")

    content_type = "text/html; charset=utf-8"
    headers: list[tuple[str, str]] = []
    for raw_name, raw_value in start.get("headers", []):
        name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
        if name == "content-type":
            content_type = value
        else:
            headers.append((name, value))

    return Response(
        body=body,
        status=start["status"],
        content_type=content_type,
        headers=tuple(headers),
    )
