"""Redirect and server configuration.

Every config type is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups once loaded.

The JSON shape mirrors the field names used by deployments::

    {
        "defaultRedirect": "https://example.com",
        "redirects": [
            {"rule": "/go", "url": "https://golang.org"},
            {"rule": "/docs/*", "url": "https://docs.example.com", "options": {"permanently": true}}
        ]
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from golow.errors import ConfigurationError

logger = logging.getLogger("golow.config")

DEFAULT_REDIRECT = "https://example.com"


@dataclass(frozen=True, slots=True)
class RedirectOptions:
    """Per-rule redirect options.

    ``permanently`` switches the response from 307 Temporary Redirect
    to 301 Moved Permanently.
    """

    permanently: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RedirectOptions:
        permanently = data.get("permanently", False)
        if not isinstance(permanently, bool):
            msg = f"options.permanently must be a boolean, got {type(permanently).__name__}"
            raise ConfigurationError(msg)
        return cls(permanently=permanently)


@dataclass(frozen=True, slots=True)
class Rule:
    """A single redirect rule: path pattern -> target URL.

    ``path`` is an exact path (``/go``) or ends in a wildcard
    (``/docs/*``, ``/word*``).
    """

    path: str
    url: str
    options: RedirectOptions = RedirectOptions()

    @property
    def is_valid(self) -> bool:
        """Rules with an empty path or URL are never registered."""
        return bool(self.path) and bool(self.url)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rule:
        if not isinstance(data, Mapping):
            msg = f"Each redirect must be an object, got {type(data).__name__}"
            raise ConfigurationError(msg)
        path = data.get("rule", "")
        url = data.get("url", "")
        for name, value in (("rule", path), ("url", url)):
            if not isinstance(value, str):
                msg = f"redirect {name!r} must be a string, got {type(value).__name__}"
                raise ConfigurationError(msg)
        options = data.get("options")
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            msg = f"redirect 'options' must be an object, got {type(options).__name__}"
            raise ConfigurationError(msg)
        return cls(path=path, url=url, options=RedirectOptions.from_dict(options))


@dataclass(frozen=True, slots=True)
class Config:
    """The rule table: ordered redirect rules plus the fallback target.

    Loaded once at process start; read-only for the process lifetime.
    """

    default_redirect: str = DEFAULT_REDIRECT
    redirects: tuple[Rule, ...] = ()

    @property
    def valid_rules(self) -> tuple[Rule, ...]:
        """Rules eligible for registration, in declaration order."""
        return tuple(rule for rule in self.redirects if rule.is_valid)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a Config from decoded JSON.

        Raises ``ConfigurationError`` on any structural problem.
        """
        if not isinstance(data, Mapping):
            msg = f"Config must be a JSON object, got {type(data).__name__}"
            raise ConfigurationError(msg)

        default = data.get("defaultRedirect")
        if not isinstance(default, str) or not default:
            msg = "Config requires a non-empty 'defaultRedirect' string"
            raise ConfigurationError(msg)

        raw_rules = data.get("redirects", [])
        if not isinstance(raw_rules, list):
            msg = f"'redirects' must be a list, got {type(raw_rules).__name__}"
            raise ConfigurationError(msg)

        return cls(
            default_redirect=default,
            redirects=tuple(Rule.from_dict(item) for item in raw_rules),
        )

    @classmethod
    def from_json(cls, text: str) -> Config:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Config is not valid JSON: {exc}"
            raise ConfigurationError(msg) from exc
        return cls.from_dict(data)


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Listener settings. Immutable after creation.

    Only ``graceful_timeout`` is exposed on the command line; the
    connection timeouts are fixed.
    """

    host: str = "0.0.0.0"
    port: int = 80
    read_timeout: float = 15.0
    write_timeout: float = 15.0
    graceful_timeout: float = 15.0


def default_config() -> Config:
    """The built-in rule table used when no config file is given."""
    return Config(
        default_redirect=DEFAULT_REDIRECT,
        redirects=(
            Rule(path="/go", url="https://golang.org"),
            Rule(path="/nh", url="https://nhalstead.me"),
        ),
    )


def load(path: str | Path | None = None) -> Config:
    """Load the redirect config.

    With no *path*, returns ``default_config()`` and never fails.
    Otherwise reads and parses the JSON file at *path*, raising
    ``ConfigurationError`` if it is unreadable or malformed.
    """
    if path is None:
        return default_config()

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read config file {str(path)!r}: {exc}"
        raise ConfigurationError(msg) from exc

    config = Config.from_json(text)
    logger.info("Loaded %d redirect rules from %s", len(config.redirects), path)
    return config
