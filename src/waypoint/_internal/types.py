"""Shared type aliases used across waypoint modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Fallback handler — receives (request, allowed?) and returns a response value
FallbackHandler: TypeAlias = Callable[..., Any]
