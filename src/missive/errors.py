"""Missive exception hierarchy.

Stream and header operations signal expected failures with sentinel
return values, so this hierarchy stays small: it covers misuse that
should stop a program at startup, not conditions callers branch on.
"""


class MissiveError(Exception):
    """Base for all missive-specific errors."""


class ConfigurationError(MissiveError):
    """Raised when a ``MessageConfig`` is invalid.

    Raised from ``MessageConfig.__post_init__`` so a bad value fails
    at construction instead of on first use.
    """
