"""Mutable, case-insensitive HTTP headers.

Implements ``MutableMapping[str, list[str]]`` and the ``MultiValueMapping``
protocol. Every name is canonicalized on the way in, so ``content-type``,
``Content_Type`` and ``CONTENT TYPE`` all address the same entry.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from functools import lru_cache
from typing import Any

from missive.config import DEFAULT_CONFIG

_SEPARATORS = re.compile(r"[ _-]")

# Names whose registered spelling is not plain title case.
_IRREGULAR = {
    "Etag": "ETag",
    "Www-Authenticate": "WWW-Authenticate",
}


@lru_cache(maxsize=1024)
def canonicalize(name: str) -> str:
    """Return the canonical spelling of a header name.

    Words are split on space, hyphen and underscore, title-cased and
    joined with hyphens::

        canonicalize("content type")   # "Content-Type"
        canonicalize("CONTENT_TYPE")   # "Content-Type"
        canonicalize("etag")           # "ETag"

    Total over every string. Empty input stays empty and separator-only
    input becomes the same number of hyphens.
    """
    key = "-".join(word.capitalize() for word in _SEPARATORS.split(name))
    return _IRREGULAR.get(key, key)


def _as_list(value: Any) -> list[Any]:
    """Coerce a header value into a value-list."""
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


class HeaderCollection(MutableMapping[str, list[str]]):
    """Case-insensitive header storage with list-valued entries.

    ``get`` / ``__getitem__`` return every value for a header.
    ``set`` replaces an entry; ``set(..., append=True)`` adds to it,
    which is how repeatable headers such as ``Set-Cookie`` accumulate.

    Usage::

        headers = HeaderCollection({"content-type": "text/html"})
        headers.set("Set-Cookie", "a=1")
        headers.set("set_cookie", "b=2", append=True)
        headers.get("SET-COOKIE")   # ["a=1", "b=2"]
    """

    __slots__ = ("_data",)

    def __init__(
        self,
        headers: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
    ) -> None:
        self._data: dict[str, list[Any]] = {}
        if headers is None:
            return
        if isinstance(headers, Mapping):
            for name, value in headers.items():
                self.set(name, value)
        else:
            for name, value in headers:
                self.set(name, value, append=True)

    @classmethod
    def from_raw(
        cls,
        raw: Iterable[tuple[bytes, bytes]],
        encoding: str = DEFAULT_CONFIG.header_encoding,
    ) -> HeaderCollection:
        """Build from ASGI-style ``(name, value)`` byte pairs.

        Repeated names append in arrival order.
        """
        headers = cls()
        for name, value in raw:
            headers.set(name.decode(encoding), value.decode(encoding), append=True)
        return headers

    # -- Canonical operations --

    def key(self, name: str) -> str:
        """Convert *name* to its canonical form."""
        return canonicalize(name)

    def get(self, name: str, default: Any = None) -> Any:  # type: ignore[override]
        """Return a copy of the value-list for *name*, or *default* if missing."""
        values = self._data.get(canonicalize(name))
        if values is None:
            return default
        return list(values)

    def has(self, name: str) -> bool:
        """Whether a header exists under any spelling of *name*."""
        return canonicalize(name) in self._data

    def remove(self, name: str) -> None:
        """Delete *name* if present. Removing a missing header is a no-op."""
        self._data.pop(canonicalize(name), None)

    def set(self, name: str, value: Any = None, append: bool = False) -> None:
        """Store a header value.

        Without *append*, the entry is replaced by *value* coerced to a
        list: a bare string becomes a one-element list, ``None`` an empty
        one. With *append*, *value* is pushed as a single trailing element
        onto the existing list (or a new one).
        """
        key = canonicalize(name)
        if not append:
            self._data[key] = _as_list(value)
            return

        values = list(self._data.get(key, []))
        values.append(value)
        self._data[key] = values

    def add(self, name: str, value: Any) -> None:
        """Append *value* to *name*. Shorthand for ``set(name, value, append=True)``."""
        self.set(name, value, append=True)

    # -- Convenience accessors --

    def get_list(self, name: str) -> list[str]:
        """Return all values for *name*, or an empty list."""
        return list(self._data.get(canonicalize(name), []))

    def get_first(self, name: str, default: str | None = None) -> str | None:
        """Return the first value for *name*, or *default* if missing or empty."""
        values = self._data.get(canonicalize(name))
        if values:
            return values[0]
        return default

    def get_line(self, name: str, default: str = "") -> str:
        """Return all values for *name* joined with ``", "``."""
        values = self._data.get(canonicalize(name))
        if not values:
            return default
        return ", ".join(str(value) for value in values)

    def all(self) -> dict[str, list[Any]]:
        """Return a shallow copy of every entry, keyed by canonical name."""
        return {key: list(values) for key, values in self._data.items()}

    def flush(self) -> None:
        """Remove every header."""
        self._data.clear()

    def copy(self) -> HeaderCollection:
        clone = type(self)()
        clone._data = self.all()
        return clone

    def raw(self, encoding: str = DEFAULT_CONFIG.header_encoding) -> tuple[tuple[bytes, bytes], ...]:
        """Render as lowercase ASGI byte pairs, one pair per value."""
        pairs: list[tuple[bytes, bytes]] = []
        for key, values in self._data.items():
            name = key.lower().encode(encoding)
            for value in values:
                if not isinstance(value, bytes):
                    value = str(value).encode(encoding)
                pairs.append((name, value))
        return tuple(pairs)

    # -- Mapping protocol --

    def __getitem__(self, name: str) -> list[str]:
        try:
            return list(self._data[canonicalize(name)])
        except KeyError:
            raise KeyError(name) from None

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        try:
            del self._data[canonicalize(name)]
        except KeyError:
            raise KeyError(name) from None

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return canonicalize(name) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"HeaderCollection({{{items}}})"
