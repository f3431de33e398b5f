"""Mux configuration.

Settings are fixed when the Mux is built and never change while it serves.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MuxConfig:
    """Mux configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = MuxConfig(debug=True, sync_handlers_in_thread=False)
    """

    # Show exception text in 500 responses instead of a generic body
    debug: bool = False

    # Run plain ``def`` handlers in a worker thread (anyio.to_thread)
    # so they never block the event loop.
    sync_handlers_in_thread: bool = True

    # Default fallback bodies
    not_found_body: str = "Not Found"
    method_not_allowed_body: str = "Method Not Allowed"
