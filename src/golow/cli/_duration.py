"""Duration parsing for command-line flags.

Accepts Go-style duration strings (``"15s"``, ``"1m30s"``, ``"500ms"``)
or a bare number of seconds (``"2.5"``).
"""

import argparse
import math
import re

# unit suffix -> seconds
UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Raises ``ValueError`` for empty, negative, or malformed input.
    """
    text = value.strip()
    if not text:
        msg = "empty duration"
        raise ValueError(msg)

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds) or seconds < 0:
            msg = f"invalid duration {value!r}"
            raise ValueError(msg)
        return seconds

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            msg = f"invalid duration {value!r}"
            raise ValueError(msg)
        total += float(match.group(1)) * UNITS[match.group(2)]
        pos = match.end()
    return total


def duration_arg(value: str) -> float:
    """``argparse`` type wrapper around ``parse_duration``."""
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
