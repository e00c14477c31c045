"""Test utilities for reason applications.

Provides an in-process test client and JSON response assertions::

    from reason.testing import TestClient, assert_json
"""

from reason.testing.assertions import assert_empty, assert_json
from reason.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_empty",
    "assert_json",
]
