"""Request path normalization.

The normalized path is the single key used for both static lookup and
dynamic matching.
"""

import posixpath


def clean_path(path: str) -> str:
    """Return the canonical form of a request path.

    - ``""`` becomes ``/`` and a missing leading ``/`` is added.
    - Repeated slashes collapse; ``.`` and ``..`` resolve lexically and
      ``..`` never climbs above the root.
    - A trailing slash is kept (``/a/b/`` stays distinct from ``/a/b``)
      unless the result is the root itself.

    Examples::

        clean_path("a/b")         -> "/a/b"
        clean_path("/a//b/./c/")  -> "/a/b/c/"
        clean_path("/a/../../b")  -> "/b"
    """
    if not path:
        return "/"
    if path[0] != "/":
        path = "/" + path

    cleaned = posixpath.normpath(path)
    # POSIX keeps exactly two leading slashes; HTTP paths never do.
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")

    if path[-1] == "/" and cleaned != "/":
        cleaned += "/"
    return cleaned
