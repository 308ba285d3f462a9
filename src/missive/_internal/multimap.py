"""MultiValueMapping protocol — shared read interface for header-like mappings.

A structural protocol so helpers can accept any multi-valued mapping
without coupling to ``HeaderCollection``.
"""

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A string-keyed mapping where every key holds an ordered list of values.

    ``__getitem__`` and ``get_list`` return all values for a key.
    ``get_first`` returns the first one.
    """

    def __getitem__(self, key: str) -> list[str]: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: Any = None) -> Any: ...
    def get_list(self, key: str) -> list[str]: ...
    def get_first(self, key: str, default: str | None = None) -> str | None: ...
