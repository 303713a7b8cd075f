"""HTTP response and redirect value types."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus


@dataclass(frozen=True, slots=True)
class Response:
    """An immutable HTTP response."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    @property
    def location(self) -> str | None:
        """The ``Location`` header, set on redirect responses."""
        return self.header("Location")

    # -- Body access --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes (encodes str bodies as UTF-8)."""
        if isinstance(self.body, bytes):
            return self.body
        return self.body.encode("utf-8")

    @property
    def text(self) -> str:
        """Body as a string (decodes bytes bodies as UTF-8)."""
        if isinstance(self.body, str):
            return self.body
        return self.body.decode("utf-8")


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect response."""

    url: str
    status: int = HTTPStatus.TEMPORARY_REDIRECT

