"""
Sift Analyzers
===============

Block splitting, entropy calculation and classification.
"""

from sift.analyzers.entropy import (
    DEFAULT_BLOCK_SIZE,
    HIGH_ENTROPY_CUTOFF,
    EntropyAnalyzer,
    analyze,
    calculate_entropy,
    classify,
    split_blocks,
)

__all__ = [
    "DEFAULT_BLOCK_SIZE",
    "HIGH_ENTROPY_CUTOFF",
    "EntropyAnalyzer",
    "analyze",
    "calculate_entropy",
    "classify",
    "split_blocks",
]
