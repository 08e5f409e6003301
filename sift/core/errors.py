"""
Sift Exceptions
================

Every failure Sift reports is a distinct exception type so callers can
tell an unreadable input, a bad configuration and an unanswered server
request apart. None of them is retried automatically.
"""

from __future__ import annotations

from shared.config import ConfigError


class SiftError(Exception):
    """Base class for Sift errors."""


class InputUnavailableError(SiftError):
    """The byte source for an input could not be read.

    Attributes:
        source: Label of the input that failed.
        reason: Short description of the failure.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot read {source}: {reason}")
        self.source = source
        self.reason = reason


class AnalysisTimeoutError(SiftError, TimeoutError):
    """No reply arrived from the analysis server within the wait bound."""


class ServerStoppedError(SiftError):
    """A request was sent to, or pending on, a server that is not running."""


__all__ = [
    "AnalysisTimeoutError",
    "ConfigError",
    "InputUnavailableError",
    "ServerStoppedError",
    "SiftError",
]
