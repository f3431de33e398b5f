"""Pattern compiler — route pattern strings to anchored regular expressions.

Pattern syntax::

    /users/{id}          named capture, one path segment (no ``/``)
    /static/*            unnamed wildcard, any text including ``/``
    /file/{name}.{ext}   captures may share a segment with literal text

Everything outside ``{...}`` and ``*`` is literal and is escaped, so a
``.`` in a pattern only ever matches a ``.`` in the path.
"""

import re

from waypoint.errors import ConfigurationError

PATTERN_CHARS = frozenset("{}*")

NAMED_CAPTURE = r"(?P<{name}>[^/]+)"
WILDCARD_CAPTURE = r"(.*)"

_TOKEN_RE = re.compile(r"\{([^{}]*)\}|\*")


def is_pattern(pattern: str) -> bool:
    """True if *pattern* contains capture syntax and needs a matcher."""
    return any(c in PATTERN_CHARS for c in pattern)


def pattern_to_regex(pattern: str) -> str:
    """Translate *pattern* into anchored regular-expression source.

    Raises ``ConfigurationError`` for empty or non-identifier capture
    names, a name used twice, or a stray ``{`` / ``}``.
    """
    parts = ["^"]
    seen: set[str] = set()
    pos = 0
    for token in _TOKEN_RE.finditer(pattern):
        parts.append(_literal(pattern, pattern[pos : token.start()]))
        pos = token.end()
        if token.group(0) == "*":
            parts.append(WILDCARD_CAPTURE)
            continue
        name = token.group(1)
        if not name.isidentifier():
            msg = f"Invalid capture name {{{name}}} in route pattern {pattern!r}."
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Capture name {{{name}}} appears more than once in route pattern {pattern!r}."
            raise ConfigurationError(msg)
        seen.add(name)
        parts.append(NAMED_CAPTURE.format(name=name))
    parts.append(_literal(pattern, pattern[pos:]))
    parts.append("$")
    return "".join(parts)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile *pattern* into a matcher with one named group per ``{name}``."""
    return re.compile(pattern_to_regex(pattern))


def _literal(pattern: str, text: str) -> str:
    if "{" in text or "}" in text:
        msg = f"Unbalanced brace in route pattern {pattern!r}."
        raise ConfigurationError(msg)
    return re.escape(text)
