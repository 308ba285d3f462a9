"""Message model configuration.

MessageConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import codecs
from dataclasses import dataclass

from missive.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class MessageConfig:
    """Message model configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = MessageConfig(spool_max_size=512 * 1024, chunk_size=8192)
    """

    # Bodies
    spool_max_size: int = 2 * 1024 * 1024  # Bytes kept in memory before a temp body rolls to disk
    chunk_size: int = 64 * 1024  # Read size for chunked iteration

    # Headers
    header_encoding: str = "latin-1"  # Codec for raw (bytes, bytes) header pairs

    def __post_init__(self) -> None:
        for name in ("spool_max_size", "chunk_size"):
            value = getattr(self, name)
            if value <= 0:
                msg = f"{name} must be positive, got {value!r}"
                raise ConfigurationError(msg)
        try:
            codecs.lookup(self.header_encoding)
        except LookupError:
            msg = f"Unknown header encoding: {self.header_encoding!r}"
            raise ConfigurationError(msg) from None


DEFAULT_CONFIG = MessageConfig()
