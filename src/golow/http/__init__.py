"""HTTP request and response types."""

from golow.http.request import Request
from golow.http.response import Redirect, Response

__all__ = ["Redirect", "Request", "Response"]
