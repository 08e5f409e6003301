"""
Sift Core Data Models
======================

Pydantic models for the Sift entropy triage engine. An
:class:`AnalysisResult` is produced once per analysed input and is frozen
after construction; presentation code reads it and discards it.

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
      Bell System Technical Journal, 27(3), 379-423.
    - Lyda, R., & Hamrock, J. (2007). Using Entropy Analysis to Find
      Encrypted and Packed Malware. IEEE Security & Privacy, 5(2).
"""

from __future__ import annotations

import enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class Classification(str, enum.Enum):
    """Data category assigned from whole-input Shannon entropy.

    ``ERROR`` is never produced by the classifier; it marks a result whose
    input could not be read.
    """

    PLAINTEXT = "plaintext"    # H in [0, 4.0)
    NATIVE = "native"          # H in [4.0, 6.5)
    COMPRESSED = "compressed"  # H in [6.5, 7.5)
    ENCRYPTED = "encrypted"    # H in [7.5, 8]
    ERROR = "error"


EntropyValue = Annotated[float, Field(ge=0.0, le=8.0)]


# ===================================================================== #
#  Analysis Result
# ===================================================================== #


class AnalysisResult(BaseModel):
    """Entropy analysis of a single input.

    Attributes:
        source: Opaque label for the input (usually a file path); may be
            empty.
        total_entropy: Shannon entropy of the whole input, bits per byte.
        block_entropies: Per-block entropy in input order.
        file_size: Input length in bytes.
        high_entropy_block_count: Blocks whose entropy is >= 7.0.
        classification: Category derived from ``total_entropy``.
        error: Read failure reason; set only when ``classification`` is
            ``ERROR``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: str
    total_entropy: EntropyValue = 0.0
    block_entropies: tuple[EntropyValue, ...] = ()
    file_size: int = Field(default=0, ge=0)
    high_entropy_block_count: int = Field(default=0, ge=0)
    classification: Classification
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> AnalysisResult:
        if self.high_entropy_block_count > len(self.block_entropies):
            raise ValueError(
                "high_entropy_block_count cannot exceed the number of blocks"
            )
        if self.classification is Classification.ERROR:
            if not self.error:
                raise ValueError("error results must carry a reason")
            if self.file_size or self.total_entropy or self.block_entropies:
                raise ValueError("error results must have zeroed numeric fields")
        elif self.error is not None:
            raise ValueError("only error results may carry an error reason")
        return self

    @classmethod
    def unavailable(cls, source: str, reason: str) -> AnalysisResult:
        """Build the sentinel result for an input that could not be read."""
        return cls(
            source=source,
            classification=Classification.ERROR,
            error=reason or "unknown error",
        )

    @property
    def is_error(self) -> bool:
        return self.classification is Classification.ERROR

    @property
    def block_count(self) -> int:
        return len(self.block_entropies)
