"""Exception hierarchy for depstage.

Failures of the underlying copy, download or VCS commands are *not*
wrapped; they propagate with their original type so callers see the real
cause.
"""


class DepstageError(Exception):
    """Base class for errors raised by depstage itself."""
    pass


class UnsupportedSourceError(DepstageError, ValueError):
    """No resolver is registered for the URI, or the resolver declined it."""
    pass


class InvalidSourceError(DepstageError, ValueError):
    """URI is unsafe to hand to an external tool (e.g. argument injection)."""
    pass


__all__ = ["DepstageError", "InvalidSourceError", "UnsupportedSourceError"]
