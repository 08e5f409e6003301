"""
Toolkit Mathematical Utilities
===============================

Byte-frequency and entropy primitives backed by NumPy.

The frequency table is always the full 256-bin histogram indexed by byte
value, so the entropy sum runs in byte-value order regardless of how the
input bytes were arranged and a permuted input gives a bit-identical
result.

References:
    [1] Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
"""

from __future__ import annotations

import math
from typing import Iterable, Union

import numpy as np
from numpy.typing import NDArray


# ---------------------------------------------------------------------------
#  Type aliases for readability
# ---------------------------------------------------------------------------
CountArray = NDArray[np.int64]
ByteSource = Union[bytes, bytearray, memoryview, Iterable[int]]

#: Maximum entropy of a byte-valued source, log2(256).
MAX_BYTE_ENTROPY: float = 8.0


def _as_buffer(data: ByteSource) -> bytes | bytearray | memoryview:
    """Coerce *data* into an object exposing the buffer protocol."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return data
    return bytes(data)


def frequency_distribution(data: ByteSource) -> CountArray:
    """Compute a 256-bin byte-value frequency histogram.

    Args:
        data: Raw byte sequence (or an iterable of ints in 0-255).

    Returns:
        1-D int64 array of length 256; entry *i* is the number of
        occurrences of byte value *i*.

    Raises:
        ValueError: If an iterable contains a value outside 0-255.
    """
    buf = _as_buffer(data)
    if len(buf) == 0:
        return np.zeros(256, dtype=np.int64)

    byte_arr = np.frombuffer(buf, dtype=np.uint8)
    return np.bincount(byte_arr, minlength=256).astype(np.int64)


def shannon_entropy(data: ByteSource) -> float:
    """Compute the Shannon entropy of a byte sequence.

    .. math::

        H = -\\sum_{i=0}^{255} p_i \\, \\log_2(p_i)

    where :math:`p_i` is the relative frequency of byte value *i*; only
    observed values contribute. The result is in **bits per byte** and
    ranges from 0.0 (constant stream) to 8.0 (every byte value equally
    frequent).

    Reference:
        Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.

    Args:
        data: Raw byte sequence to analyse.

    Returns:
        Shannon entropy in bits per byte. Returns 0.0 for empty input.
    """
    buf = _as_buffer(data)
    length = len(buf)
    if length == 0:
        return 0.0

    counts = frequency_distribution(buf)
    entropy = 0.0
    for count in counts[counts > 0].tolist():
        p = count / length
        entropy -= p * math.log2(p)
    return min(entropy, MAX_BYTE_ENTROPY)
