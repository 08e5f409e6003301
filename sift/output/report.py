"""
Sift JSON Output
=================

Machine-readable rendering of analysis results: one compact JSON object
per input, with keys in a fixed order::

    {"file":"sample.bin","entropy":7.1235,"size":4096,"class":"compressed"}

Error results keep the same keys, report ``"class":"error"`` and add an
``"error"`` key with the failure reason.

Entropy rounding: the float's shortest decimal representation is rounded
half away from zero to four places and always printed with four places,
so ``7.12345`` renders as ``7.1235`` and ``0.0`` as ``0.0000``.
"""

from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Iterable

from sift.core.models import AnalysisResult

_ENTROPY_QUANTUM = Decimal("0.0001")


def _quantize(value: float) -> Decimal:
    return Decimal(repr(value)).quantize(_ENTROPY_QUANTUM, rounding=ROUND_HALF_UP)


def round_entropy(value: float) -> float:
    """Round *value* to four decimal places, half away from zero."""
    return float(_quantize(value))


def format_entropy(value: float) -> str:
    """Fixed four-place text for *value*, e.g. ``0.0000`` or ``7.1235``."""
    return str(_quantize(value))


def result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Build the JSON payload for one result."""
    payload: dict[str, Any] = {
        "file": result.source,
        "entropy": round_entropy(result.total_entropy),
        "size": result.file_size,
        "class": result.classification.value,
    }
    if result.is_error:
        payload["error"] = result.error
    return payload


def render_json(result: AnalysisResult) -> str:
    """Render one result as a single compact JSON line (no newline).

    The entropy is written as a number with exactly four decimal places,
    so the line is assembled field by field rather than by ``json.dumps``
    on the whole payload.
    """
    fields = []
    for key, value in result_to_dict(result).items():
        if key == "entropy":
            text = format_entropy(result.total_entropy)
        else:
            text = json.dumps(value, ensure_ascii=False)
        fields.append(f"{json.dumps(key)}:{text}")
    return "{" + ",".join(fields) + "}"


class SiftReportGenerator:
    """Writes analysis results to JSON-lines report files."""

    def write_json_lines(
        self,
        results: Iterable[AnalysisResult],
        output_path: Path,
    ) -> Path:
        """Write one JSON line per result to *output_path*.

        Args:
            results: Results in display order.
            output_path: Destination file; parent directories are created.

        Returns:
            Path to the written file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [render_json(r) for r in results]
        output_path.write_text(
            "".join(line + "\n" for line in lines),
            encoding="utf-8",
        )
        return output_path
