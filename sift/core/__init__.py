"""
Sift Core Module
=================

Data models and exceptions for the Sift entropy triage tool. The engine
lives in :mod:`sift.core.engine`.
"""

from sift.core.errors import (
    AnalysisTimeoutError,
    ConfigError,
    InputUnavailableError,
    ServerStoppedError,
    SiftError,
)
from sift.core.models import AnalysisResult, Classification

__all__ = [
    "AnalysisResult",
    "AnalysisTimeoutError",
    "Classification",
    "ConfigError",
    "InputUnavailableError",
    "ServerStoppedError",
    "SiftError",
]
