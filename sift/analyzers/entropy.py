"""
Entropy Analyzer
=================

Splits binary data into fixed-size blocks, computes Shannon entropy per
block and over the whole input, and classifies the input from its total
entropy.

Classification ranges (lower bound inclusive, upper bound exclusive):
    - [0, 4.0)   : plaintext  -- ASCII text, source code, sparse data
    - [4.0, 6.5) : native     -- compiled machine code
    - [6.5, 7.5) : compressed -- compressed or packed content
    - [7.5, 8.0] : encrypted  -- encrypted or random content

A block whose own entropy is at least 7.0 counts as a high-entropy
block, a common packing/encryption indicator. That cutoff is fixed and
independent of the display threshold used when listing blocks.

The whole-input entropy is computed directly from the input; it is not
derived from the block values, since entropy does not add up across a
partition with different symbol distributions.

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
      Bell System Technical Journal, 27(3), 379-423.
    - Lyda, R., & Hamrock, J. (2007). Using Entropy Analysis to Find
      Encrypted and Packed Malware. IEEE Security & Privacy, 5(2).
"""

from __future__ import annotations

import math

from shared.math_utils import ByteSource, shannon_entropy
from sift.core.models import AnalysisResult, Classification


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_BLOCK_SIZE: int = 256
HIGH_ENTROPY_CUTOFF: float = 7.0

PLAINTEXT_CEILING: float = 4.0
NATIVE_CEILING: float = 6.5
COMPRESSED_CEILING: float = 7.5


def _as_view(data: ByteSource) -> memoryview:
    """Return a flat unsigned-byte view over *data*."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data)
    view = memoryview(data)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


# ---------------------------------------------------------------------------
# Core operations
# ---------------------------------------------------------------------------


def split_blocks(data: ByteSource, block_size: int) -> list[memoryview]:
    """Partition *data* into consecutive blocks of *block_size* bytes.

    Each block is a read-only-by-convention view into *data*; no bytes
    are copied. Every block but the last is exactly *block_size* long and
    the last holds the remainder. Empty input yields no blocks.

    Args:
        data: Bytes to partition.
        block_size: Positive block length in bytes.

    Returns:
        Blocks in input order.

    Raises:
        ValueError: If *block_size* is not positive.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")

    view = _as_view(data)
    return [
        view[offset : offset + block_size]
        for offset in range(0, len(view), block_size)
    ]


def calculate_entropy(data: ByteSource) -> float:
    """Shannon entropy of *data* in bits per byte, within [0.0, 8.0].

    Empty input returns exactly ``0.0``.
    """
    return shannon_entropy(data)


def classify(entropy: float) -> Classification:
    """Map a whole-input entropy value to its :class:`Classification`.

    Never returns ``Classification.ERROR``.

    Raises:
        ValueError: If *entropy* is NaN.
    """
    if math.isnan(entropy):
        raise ValueError("entropy must be a number, got NaN")
    if entropy < PLAINTEXT_CEILING:
        return Classification.PLAINTEXT
    elif entropy < NATIVE_CEILING:
        return Classification.NATIVE
    elif entropy < COMPRESSED_CEILING:
        return Classification.COMPRESSED
    else:
        return Classification.ENCRYPTED


def analyze(
    data: ByteSource,
    block_size: int = DEFAULT_BLOCK_SIZE,
    source: str = "<bytes>",
) -> AnalysisResult:
    """Run the full entropy analysis over *data*.

    Args:
        data: Raw bytes of the input.
        block_size: Block length for per-block entropy.
        source: Label recorded on the result; not interpreted.

    Returns:
        A frozen :class:`AnalysisResult`.

    Raises:
        ValueError: If *block_size* is not positive.
    """
    view = _as_view(data)
    block_entropies = tuple(
        calculate_entropy(block) for block in split_blocks(view, block_size)
    )
    total = calculate_entropy(view)
    high_count = sum(1 for h in block_entropies if h >= HIGH_ENTROPY_CUTOFF)

    return AnalysisResult(
        source=source,
        total_entropy=total,
        block_entropies=block_entropies,
        file_size=len(view),
        high_entropy_block_count=high_count,
        classification=classify(total),
    )


# ---------------------------------------------------------------------------
# EntropyAnalyzer
# ---------------------------------------------------------------------------


class EntropyAnalyzer:
    """Entropy analysis bound to a fixed block size.

    Usage::

        analyzer = EntropyAnalyzer(block_size=512)
        result = analyzer.analyze(data, source="sample.bin")

    Attributes:
        block_size: Block length in bytes for per-block entropy.
    """

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self.block_size = block_size

    def analyze(self, data: ByteSource, source: str = "<bytes>") -> AnalysisResult:
        """Analyse *data*; see :func:`analyze`."""
        return analyze(data, self.block_size, source=source)

    def analyze_blocks(self, data: ByteSource) -> list[float]:
        """Per-block entropy values only, in input order."""
        return [calculate_entropy(b) for b in split_blocks(data, self.block_size)]
