"""
Sift -- File Entropy Analyzer
==============================

Computes Shannon entropy over file contents, per block and over the
whole file, and classifies each file as plaintext, native code,
compressed or encrypted data. A common first-pass triage step in malware
analysis and forensics.

Modules:
    - sift.analyzers.entropy: Block splitter, entropy, classifier
    - sift.core.models: Pydantic result models
    - sift.core.engine: File reading and multi-file orchestration
    - sift.server: Async request/response analysis server
    - sift.output: Console and JSON output
    - sift.cli: Click-based command-line interface

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
    - Lyda, R., & Hamrock, J. (2007). Using Entropy Analysis to Find
      Encrypted and Packed Malware. IEEE Security & Privacy, 5(2).
"""

__version__ = "1.0.0"
__tool_name__ = "sift"

from sift.analyzers.entropy import analyze, calculate_entropy, classify  # noqa: E402
from sift.core.models import AnalysisResult, Classification  # noqa: E402

__all__ = [
    "AnalysisResult",
    "Classification",
    "analyze",
    "calculate_entropy",
    "classify",
]
