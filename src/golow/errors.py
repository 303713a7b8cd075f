"""golow exception hierarchy.

Shared across config loading, Router, App, and the server lifecycle so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class GolowError(Exception):
    """Base for all golow-specific errors."""


class ConfigurationError(GolowError):
    """Raised when the redirect configuration or a route pattern is invalid.

    Typically raised by ``load()`` or while the App compiles its router.
    """


class ServerStartupError(GolowError):
    """Raised when the server cannot bind its listening socket."""


@dataclass(frozen=True, slots=True)
class HTTPError(GolowError):
    """An error that maps directly to an HTTP status code.

    Raised by the router. The ASGI handler catches ``NotFound`` and
    dispatches to the fallback redirect instead of emitting an error page.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
