"""Redirect handlers — bind a target URL and options to a route.

Each valid rule gets its own handler closure; the fallback handler
covers every path no rule matches. A target without a scheme or host
is resolved against the request path, so ``other`` requested from
``/a/b`` goes to ``/a/other``.
"""

import logging
from collections.abc import Callable
from http import HTTPStatus
from urllib.parse import urljoin

from golow.config import RedirectOptions
from golow.http.request import Request
from golow.http.response import Redirect

logger = logging.getLogger("golow.redirect")

RedirectHandler = Callable[[Request], Redirect]


def resolve_target(request: Request, url: str) -> str:
    """Resolve *url* against the request path. Absolute URLs pass through."""
    return urljoin(request.path, url)


def redirect_status(options: RedirectOptions) -> int:
    """Status code for a rule redirect.

    307 Temporary Redirect unless the rule asks to redirect permanently,
    in which case 301 Moved Permanently.
    """
    if options.permanently:
        return HTTPStatus.MOVED_PERMANENTLY
    return HTTPStatus.TEMPORARY_REDIRECT


def redirect_to(url: str, options: RedirectOptions | None = None) -> RedirectHandler:
    """Build the handler registered for a single rule."""
    status = redirect_status(options or RedirectOptions())

    def handler(request: Request) -> Redirect:
        logger.info("Redirected User Rule Based: %s", url)
        return Redirect(url=resolve_target(request, url), status=status)

    return handler


def fallback_to(url: str) -> RedirectHandler:
    """Build the handler used when no rule matches. Always 307."""

    def handler(request: Request) -> Redirect:
        logger.info("Redirected User with Default: %s", url)
        return Redirect(url=resolve_target(request, url), status=HTTPStatus.TEMPORARY_REDIRECT)

    return handler
