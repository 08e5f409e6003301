"""
Sift Output Module
===================

Console display and JSON rendering for Sift analysis results.
"""

from sift.output.console import SiftConsoleOutput
from sift.output.report import (
    SiftReportGenerator,
    format_entropy,
    render_json,
    round_entropy,
)

__all__ = [
    "SiftConsoleOutput",
    "SiftReportGenerator",
    "format_entropy",
    "render_json",
    "round_entropy",
]
