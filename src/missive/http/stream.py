"""HTTP message body stream with cached resource metadata.

A ``MessageStream`` owns a binary resource (file, ``BytesIO``, spooled
temp file, socket file) and snapshots its capabilities when attached:
readable, writable, seekable, local, uri and mode. Every operation
consults that snapshot instead of asking the resource again.

Expected failures never raise. Reading an unreadable stream, writing an
unwritable one, seeking an unseekable one, or an ``OSError`` from the
resource itself all come back as ``None`` / ``False`` / ``b""`` so
callers branch on the return value.
"""

from __future__ import annotations

import io
import logging
import os
import stat
from dataclasses import dataclass, replace
from os import PathLike
from tempfile import SpooledTemporaryFile
from typing import Any

from missive.config import DEFAULT_CONFIG, MessageConfig
from missive.http.protocol import Resource

logger = logging.getLogger("missive.stream")

WRAPPER_FILE = "plainfile"
WRAPPER_MEMORY = "memory"
WRAPPER_SOCKET = "socket"
WRAPPER_USER = "user"

# Bare modes (``b`` and ``t`` stripped) that cannot read.
_WRITE_ONLY_MODES = frozenset({"w", "a", "x", "c"})

# io.UnsupportedOperation is both; ValueError covers I/O on a closed file.
_IO_ERRORS = (OSError, ValueError)


@dataclass(frozen=True, slots=True)
class StreamMeta:
    """Capabilities of a resource, captured when it is attached.

    ``wrapper`` names what backs the stream: ``"plainfile"`` for an OS
    descriptor, ``"memory"`` for an in-process buffer, ``"socket"`` for a
    socket file and ``"user"`` for any other file-like object. It is
    empty while nothing is attached.
    """

    readable: bool = False
    writable: bool = False
    seekable: bool = False
    local: bool = False
    uri: str | None = None
    mode: str = ""
    wrapper: str = ""

    @classmethod
    def unattached(cls) -> StreamMeta:
        return cls()

    def downgraded(self) -> StreamMeta:
        """Copy with reading and writing switched off."""
        return replace(self, readable=False, writable=False)


def _probe(resource: Any, name: str, fallback: bool) -> bool:
    method = getattr(resource, name, None)
    if not callable(method):
        return fallback
    try:
        return bool(method())
    except _IO_ERRORS:
        return False


def _mode_of(resource: Any) -> str:
    mode = getattr(resource, "mode", None)
    if isinstance(mode, str) and mode:
        return mode

    readable = _probe(resource, "readable", hasattr(resource, "read"))
    writable = _probe(resource, "writable", hasattr(resource, "write"))
    if readable and writable:
        return "r+b"
    if writable:
        return "wb"
    return "rb"


def _uri_of(resource: Any) -> str | None:
    name = getattr(resource, "name", None)
    if isinstance(name, (str, PathLike)):
        return os.fspath(name)
    if isinstance(name, bytes):
        return os.fsdecode(name)
    # Integer descriptors and anonymous buffers have no uri.
    return None


def _wrapper_of(resource: Any) -> tuple[str, bool]:
    """Return ``(wrapper, local)`` for *resource*."""
    # fileno() would roll a spooled file over to disk.
    if isinstance(resource, (io.BytesIO, SpooledTemporaryFile)):
        return WRAPPER_MEMORY, True

    fileno = getattr(resource, "fileno", None)
    if callable(fileno):
        try:
            info = os.fstat(fileno())
        except _IO_ERRORS:
            pass
        else:
            if stat.S_ISSOCK(info.st_mode):
                return WRAPPER_SOCKET, False
            return WRAPPER_FILE, True

    return WRAPPER_USER, False


def describe(resource: Resource) -> StreamMeta:
    """Build the metadata snapshot for *resource*.

    Readability and writability come from the open mode: with ``b`` and
    ``t`` removed, ``w``/``a``/``x``/``c`` cannot read and ``r`` cannot
    write. Resources without a string ``mode`` get one synthesized from
    their ``readable()``/``writable()`` methods.
    """
    mode = _mode_of(resource)
    bare = mode.replace("b", "").replace("t", "")
    wrapper, local = _wrapper_of(resource)

    return StreamMeta(
        readable=bare not in _WRITE_ONLY_MODES,
        writable=bare != "r",
        seekable=_probe(resource, "seekable", hasattr(resource, "seek")),
        local=local,
        uri=_uri_of(resource),
        mode=mode,
        wrapper=wrapper,
    )


class MessageStream:
    """A message body backed by a binary resource.

    The stream takes ownership of the resource: it is closed by
    ``close()``, on context-manager exit, or when the stream is garbage
    collected. ``detach()`` hands it back without closing.

    Usage::

        body = MessageStream.from_bytes(b"hello world")
        body.read(5)          # b"hello"
        body.get_contents()   # b"hello world", cursor stays at 5
        body.get_size()       # 11
    """

    __slots__ = ("_advanced", "_cache", "_closed", "_eof", "_stream")

    def __init__(self, stream: Resource | None = None) -> None:
        self._stream: Resource | None = None
        self._cache = StreamMeta.unattached()
        # Set by a read that came back empty; the EOF signal for
        # resources that can neither report it nor be measured.
        self._eof = False
        # Set once a read returns data; a stream that cannot seek can no
        # longer be read from offset 0 after that.
        self._advanced = False
        # Set by a successful close(); resources need not expose `closed`.
        self._closed = False
        if stream is not None:
            self.attach(stream)

    # -- Factories --

    @classmethod
    def from_bytes(cls, data: bytes = b"") -> MessageStream:
        """Wrap *data* in an in-memory, read-write buffer."""
        return cls(io.BytesIO(data))

    @classmethod
    def from_path(cls, path: str | PathLike[str], mode: str = "rb") -> MessageStream:
        """Open *path* in binary *mode* and wrap it.

        Raises ``OSError`` if the file cannot be opened.
        """
        if "b" not in mode:
            mode += "b"
        return cls(open(path, mode))  # noqa: SIM115

    @classmethod
    def temporary(cls, data: bytes = b"", config: MessageConfig = DEFAULT_CONFIG) -> MessageStream:
        """A read-write body that stays in memory up to ``config.spool_max_size``."""
        spool = SpooledTemporaryFile(max_size=config.spool_max_size, mode="w+b")  # noqa: SIM115
        if data:
            spool.write(data)
            spool.seek(0)
        return cls(spool)

    # -- Resource lifecycle --

    def attach(self, stream: Resource) -> MessageStream:
        """Take ownership of *stream* and rebuild the metadata cache."""
        self._stream = stream
        self._eof = False
        self._advanced = False
        self._closed = False
        self.build_cache()
        logger.debug(
            "Attached %s stream (mode=%s, uri=%s)",
            self._cache.wrapper,
            self._cache.mode,
            self._cache.uri,
        )
        return self

    set_stream = attach

    def build_cache(self) -> MessageStream:
        """Re-derive the metadata cache from the attached resource."""
        if self._stream is None:
            self._cache = StreamMeta.unattached()
        else:
            self._cache = describe(self._stream)
        return self

    def close(self) -> bool:
        """Close the resource.

        Returns ``True`` and marks the stream unreadable and unwritable
        when the close succeeds. Returns ``False``, leaving the cache
        alone, when nothing is attached, the resource is already closed,
        or closing it fails.
        """
        stream = self._stream
        if stream is None or self._closed or getattr(stream, "closed", False):
            return False
        try:
            stream.close()
        except _IO_ERRORS as exc:
            logger.debug("Closing %s stream failed: %s", self._cache.wrapper, exc)
            return False

        self._closed = True
        self._cache = self._cache.downgraded()
        logger.debug("Closed %s stream (uri=%s)", self._cache.wrapper, self._cache.uri)
        return True

    def detach(self) -> bool:
        """Release the resource without closing it.

        The caller becomes responsible for the handle (grab it from
        ``stream`` first). The cache resets to the unattached snapshot.
        """
        if self._stream is not None:
            logger.debug("Detached %s stream (uri=%s)", self._cache.wrapper, self._cache.uri)
        self._stream = None
        self._cache = StreamMeta.unattached()
        self._eof = False
        self._advanced = False
        self._closed = False
        return True

    # -- I/O --

    def read(self, length: int = -1) -> bytes | None:
        """Read up to *length* bytes from the cursor.

        Returns ``None`` when the stream is not readable or the read
        fails. An empty result means no data; use ``eof()`` to tell
        whether the end was reached.
        """
        stream = self._stream
        if stream is None or not self._cache.readable:
            return None
        try:
            data = stream.read(length)
        except _IO_ERRORS as exc:
            logger.debug("Read from %s stream failed: %s", self._cache.wrapper, exc)
            return None
        if data is None:
            # Non-blocking resource with nothing available yet.
            return None
        if length < 0 or (length and not data):
            self._eof = True
        if data:
            self._advanced = True
        return data

    def write(self, data: bytes) -> int | None:
        """Write *data* and return the number of bytes written, or ``None``."""
        stream = self._stream
        if stream is None or not self._cache.writable:
            return None
        try:
            written = stream.write(data)
        except _IO_ERRORS as exc:
            logger.debug("Write to %s stream failed: %s", self._cache.wrapper, exc)
            return None
        return written

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> bool:
        """Move the cursor. ``False`` if the stream is not seekable or the seek fails."""
        stream = self._stream
        if stream is None or not self._cache.seekable:
            return False
        try:
            stream.seek(offset, whence)
        except _IO_ERRORS as exc:
            logger.debug("Seek on %s stream failed: %s", self._cache.wrapper, exc)
            return False
        self._eof = False
        return True

    def rewind(self) -> bool:
        """Move the cursor back to the start."""
        return self.seek(0)

    def tell(self) -> int | None:
        """Current cursor offset, or ``None`` if it cannot be queried."""
        stream = self._stream
        if stream is None:
            return None
        try:
            return stream.tell()
        except _IO_ERRORS:
            return None

    def eof(self) -> bool:
        """Whether the cursor is at the end of the data.

        Uses the resource's own ``eof()`` when it has one and measures the
        end of seekable resources. Otherwise it reports whether a read has
        already come back empty or read to the end with ``length=-1``: a
        short read that happens to stop exactly at the end leaves it
        ``False`` until the next read returns nothing.
        """
        stream = self._stream
        if stream is None or self._closed or getattr(stream, "closed", False):
            return True

        probe = getattr(stream, "eof", None)
        if callable(probe):
            try:
                return bool(probe())
            except _IO_ERRORS:
                return True

        if self._cache.seekable:
            try:
                position = stream.tell()
                stream.seek(0, os.SEEK_END)
                end = stream.tell()
                stream.seek(position)
            except _IO_ERRORS:
                return self._eof
            return position >= end

        return self._eof

    is_consumed = eof

    def get_contents(self, max_length: int = -1) -> bytes | None:
        """Read the body from the start without moving the cursor.

        Up to *max_length* bytes are read from offset 0 and the cursor is
        put back where it was. Returns ``b""`` when the stream is not
        readable, or cannot seek and is already at the end. Returns
        ``None`` if the read itself fails, or if the stream cannot seek
        and has already been read from, since offset 0 is out of reach.

        A stream that cannot seek and has not been read yet is read from
        the start and stays consumed.
        """
        if not self._cache.readable or (not self._cache.seekable and self.eof()):
            return b""

        if not self._cache.seekable and self._advanced:
            return None

        position = self.tell()
        if self._cache.seekable and not self.seek(0):
            return None

        buffer = self.read(max_length)

        if position is not None:
            self.seek(position)
        return buffer

    def get_size(self) -> int | None:
        """Size of the body in bytes.

        Local resources are flushed first so the size includes buffered
        writes. OS-backed regular files report their ``fstat`` size;
        everything else is measured by reading it through
        ``get_contents()``. That fallback reads the whole body, and on a
        stream that cannot seek it consumes what it reads. Returns ``None``
        when the body cannot be measured that way (see ``get_contents``).
        """
        stream = self._stream
        if stream is not None and self._cache.local:
            flush = getattr(stream, "flush", None)
            if callable(flush):
                try:
                    flush()
                except _IO_ERRORS as exc:
                    logger.debug("Flush before stat failed: %s", exc)

        if stream is not None and self._cache.wrapper == WRAPPER_FILE:
            try:
                info = os.fstat(stream.fileno())  # type: ignore[attr-defined]
            except _IO_ERRORS:
                pass
            else:
                if stat.S_ISREG(info.st_mode):
                    return info.st_size

        contents = self.get_contents()
        if contents is None:
            return None
        return len(contents)

    # -- Cached capabilities --

    @property
    def stream(self) -> Resource | None:
        """The raw resource, or ``None`` when unattached."""
        return self._stream

    @property
    def cache(self) -> StreamMeta:
        return self._cache

    @property
    def mode(self) -> str:
        return self._cache.mode

    @property
    def uri(self) -> str | None:
        return self._cache.uri

    def is_readable(self) -> bool:
        return self._cache.readable

    def is_writable(self) -> bool:
        return self._cache.writable

    def is_seekable(self) -> bool:
        return self._cache.seekable

    def is_local(self) -> bool:
        return self._cache.local

    def is_repeatable(self) -> bool:
        """Whether the body can be read again after it is consumed."""
        return self._cache.readable and self._cache.seekable

    # -- Dunder protocol --

    def __bytes__(self) -> bytes:
        return self.get_contents() or b""

    def __enter__(self) -> MessageStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_stream", None) is not None and not getattr(self, "_closed", True):
            self.close()

    def __repr__(self) -> str:
        meta = self._cache
        return f"MessageStream(wrapper={meta.wrapper!r}, mode={meta.mode!r}, uri={meta.uri!r})"
