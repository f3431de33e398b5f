"""Immutable, case-insensitive HTTP headers.

Built from the raw byte pairs in an ASGI scope. Names are lower-cased
and both sides are decoded as latin-1 once, at construction.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive request headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns every value sent for a name.
    """

    __slots__ = ("_items",)

    def __init__(self, items: tuple[tuple[str, str], ...] = ()) -> None:
        object.__setattr__(self, "_items", tuple((k.lower(), v) for k, v in items))

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> "Headers":
        """Decode ASGI ``(name, value)`` byte pairs."""
        return cls(tuple((k.decode("latin-1"), v.decode("latin-1")) for k, v in raw))

    def __getitem__(self, key: str) -> str:
        key = key.lower()
        for name, value in self._items:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._items))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._items))

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"

    def get_list(self, key: str) -> list[str]:
        key = key.lower()
        return [value for name, value in self._items if name == key]
