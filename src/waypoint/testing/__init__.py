"""Test utilities for waypoint muxes.

    from waypoint.testing import TestClient
"""

from waypoint.testing.client import TestClient

__all__ = ["TestClient"]
