"""Immutable HTTP request.

Frozen metadata only. Redirect handlers never read a request body,
so none is exposed.
"""

from __future__ import annotations

from dataclasses import dataclass

from golow._internal.asgi import Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request built from an ASGI scope."""

    method: str
    path: str

    @classmethod
    def from_asgi(cls, scope: Scope) -> Request:
        """Build a Request from a raw ASGI HTTP or WebSocket scope.

        WebSocket scopes carry no method; the upgrade is always a GET.
        """
        return cls(method=scope.get("method", "GET"), path=scope["path"])
