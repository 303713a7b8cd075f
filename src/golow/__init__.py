"""golow — lightweight HTTP server that redirects requests by path rules.

Rules map a path pattern (exact, or with a trailing ``*`` wildcard) to a
target URL; anything unmatched goes to the default redirect.

Basic usage::

    from golow import App, Rule, Config
    from golow.server.lifecycle import run_server

    app = App(Config(
        default_redirect="https://example.com",
        redirects=(Rule("/go", "https://golang.org"),),
    ))
    run_server(app)
"""

from golow.app import App
from golow.config import Config, RedirectOptions, Rule, ServerConfig, load
from golow.errors import ConfigurationError, GolowError, NotFound, ServerStartupError
from golow.http.response import Redirect, Response

__version__ = "0.1.0"
__all__ = [
    "App",
    "Config",
    "ConfigurationError",
    "GolowError",
    "NotFound",
    "Redirect",
    "RedirectOptions",
    "Response",
    "Rule",
    "ServerConfig",
    "ServerStartupError",
    "load",
]
