"""Test utilities for golow applications::

    from golow.testing import TestClient
"""

from golow.testing.client import TestClient

__all__ = ["TestClient"]
