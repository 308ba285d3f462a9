"""Async access to message bodies using anyio worker threads.

``MessageStream`` does blocking I/O. ``AsyncMessageStream`` runs each
blocking call in a worker thread via ``anyio.to_thread`` so a body can
be read or written from async code without stalling the event loop.
Capability queries only touch the cached metadata and stay synchronous.

One ``AsyncMessageStream`` must not be used from concurrent tasks: the
underlying stream has a single cursor and no lock of its own.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any

from anyio import to_thread

from missive.config import DEFAULT_CONFIG, MessageConfig
from missive.http.stream import MessageStream


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    """Run blocking call in anyio worker thread."""
    return to_thread.run_sync(func, *args)


class AsyncMessageStream:
    """Async wrapper around ``MessageStream``."""

    __slots__ = ("_chunk_size", "_stream")

    def __init__(self, stream: MessageStream, *, config: MessageConfig = DEFAULT_CONFIG) -> None:
        self._stream = stream
        self._chunk_size = config.chunk_size

    @property
    def stream(self) -> MessageStream:
        return self._stream

    def is_readable(self) -> bool:
        return self._stream.is_readable()

    def is_writable(self) -> bool:
        return self._stream.is_writable()

    def is_seekable(self) -> bool:
        return self._stream.is_seekable()

    def is_repeatable(self) -> bool:
        return self._stream.is_repeatable()

    async def read(self, length: int = -1) -> bytes | None:
        return await _run_sync(self._stream.read, length)

    async def write(self, data: bytes) -> int | None:
        return await _run_sync(self._stream.write, data)

    async def seek(self, offset: int, whence: int = 0) -> bool:
        return await _run_sync(self._stream.seek, offset, whence)

    async def tell(self) -> int | None:
        return await _run_sync(self._stream.tell)

    async def eof(self) -> bool:
        return await _run_sync(self._stream.eof)

    async def get_contents(self, max_length: int = -1) -> bytes | None:
        return await _run_sync(self._stream.get_contents, max_length)

    async def get_size(self) -> int | None:
        return await _run_sync(self._stream.get_size)

    async def close(self) -> bool:
        return await _run_sync(self._stream.close)

    def detach(self) -> bool:
        return self._stream.detach()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Yield the body from the cursor onward in ``config.chunk_size`` pieces.

        Stops at the first empty or failed read.
        """
        while True:
            chunk = await self.read(self._chunk_size)
            if not chunk:
                break
            yield chunk

    async def __aenter__(self) -> AsyncMessageStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
