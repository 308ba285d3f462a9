"""Missive — an in-memory HTTP message model.

Headers with canonical, case-insensitive names and body streams that
cache what their resource can do.

Basic usage::

    from missive import HeaderCollection, MessageStream

    headers = HeaderCollection()
    headers.set("content type", "text/plain")
    headers.get("Content-Type")     # ["text/plain"]

    body = MessageStream.from_bytes(b"hello world")
    body.read(5)                    # b"hello"
    body.get_contents()             # b"hello world"

Async bodies (runs blocking I/O in anyio worker threads)::

    from missive import AsyncMessageStream
    async for chunk in AsyncMessageStream(body).iter_chunks():
        ...
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AsyncMessageStream",
    "ConfigurationError",
    "HeaderCollection",
    "MessageConfig",
    "MessageStream",
    "MissiveError",
    "StreamMeta",
    "canonicalize",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import missive`` fast and leaves anyio unimported until the
    async wrapper is asked for.
    """
    if name in ("HeaderCollection", "canonicalize"):
        from missive.http import headers as _headers

        return getattr(_headers, name)

    if name in ("MessageStream", "StreamMeta"):
        from missive.http import stream as _stream

        return getattr(_stream, name)

    if name == "AsyncMessageStream":
        from missive.http.aio import AsyncMessageStream

        return AsyncMessageStream

    if name == "MessageConfig":
        from missive.config import MessageConfig

        return MessageConfig

    if name in ("ConfigurationError", "MissiveError"):
        from missive import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
