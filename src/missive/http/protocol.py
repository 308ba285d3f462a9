"""Structural contracts for message bodies and the resources behind them.

``Resource`` is what a ``MessageStream`` can wrap: any binary file-like
object. ``Body`` is what message objects consume: anything that behaves
like a ``MessageStream``.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Resource(Protocol):
    """A binary I/O handle.

    Only these five methods are required. ``eof``, ``fileno``, ``flush``,
    ``readable``, ``writable``, ``seekable``, ``mode`` and ``name`` are
    probed when the resource is attached and used when present.
    """

    def read(self, size: int = -1, /) -> bytes | None: ...
    def write(self, data: Any, /) -> int | None: ...
    def seek(self, offset: int, whence: int = 0, /) -> int: ...
    def tell(self) -> int: ...
    def close(self) -> None: ...


@runtime_checkable
class Body(Protocol):
    """A message body stream.

    Capability failures are reported with sentinels (``None``, ``False``,
    ``b""``) rather than exceptions.
    """

    def read(self, length: int) -> bytes | None: ...
    def write(self, data: bytes) -> int | None: ...
    def seek(self, offset: int, whence: int = 0) -> bool: ...
    def tell(self) -> int | None: ...
    def eof(self) -> bool: ...
    def get_contents(self, max_length: int = -1) -> bytes | None: ...
    def get_size(self) -> int | None: ...
    def close(self) -> bool: ...
    def detach(self) -> bool: ...
    def is_readable(self) -> bool: ...
    def is_writable(self) -> bool: ...
    def is_seekable(self) -> bool: ...
