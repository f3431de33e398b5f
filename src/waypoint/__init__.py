"""Waypoint — an HTTP request router for ASGI.

Static paths, ``{name}`` segment captures, and ``*`` wildcards, with
method-aware dispatch and ``405 Method Not Allowed`` answers that carry
an ``Allow`` header.

Basic usage::

    from waypoint import Mux, param_value

    mux = Mux()

    @mux.get("/hello/{name}")
    def hello(request):
        return f"Hello, {param_value(request, 'name')}!"

Serve ``mux`` with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "ANY_METHOD",
    "ConfigurationError",
    "HTTPError",
    "MethodHandler",
    "MethodNotAllowed",
    "Mux",
    "MuxConfig",
    "NotFound",
    "PathParams",
    "Request",
    "Response",
    "Route",
    "RouteMatch",
    "WaypointError",
    "clean_path",
    "compile_pattern",
    "param_value",
]

# public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "ANY_METHOD": "waypoint.routing.route",
    "ConfigurationError": "waypoint.errors",
    "HTTPError": "waypoint.errors",
    "MethodHandler": "waypoint.methods",
    "MethodNotAllowed": "waypoint.errors",
    "Mux": "waypoint.mux",
    "MuxConfig": "waypoint.config",
    "NotFound": "waypoint.errors",
    "PathParams": "waypoint.routing.params",
    "Request": "waypoint.http.request",
    "Response": "waypoint.http.response",
    "Route": "waypoint.routing.route",
    "RouteMatch": "waypoint.routing.route",
    "WaypointError": "waypoint.errors",
    "clean_path": "waypoint.routing.path",
    "compile_pattern": "waypoint.routing.pattern",
    "param_value": "waypoint.routing.params",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
