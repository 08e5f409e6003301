"""Tests for sift.core.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sift import analyze
from sift.core.models import AnalysisResult, Classification


class TestAnalysisResult:
    def test_frozen(self) -> None:
        result = analyze(b"abc", 2, source="a")
        with pytest.raises(ValidationError):
            result.total_entropy = 1.0  # type: ignore[misc]

    def test_entropy_range_enforced(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(source="a", total_entropy=8.5, classification="encrypted")
        with pytest.raises(ValidationError):
            AnalysisResult(source="a", total_entropy=-0.1, classification="plaintext")

    def test_block_entropy_range_enforced(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(
                source="a",
                block_entropies=(9.0,),
                classification="plaintext",
            )

    def test_high_count_cannot_exceed_blocks(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(
                source="a",
                block_entropies=(7.5,),
                high_entropy_block_count=2,
                classification="encrypted",
                total_entropy=7.5,
            )

    def test_classification_coerced_from_string(self) -> None:
        result = AnalysisResult(source="a", classification="native", total_entropy=5.0)
        assert result.classification is Classification.NATIVE


class TestErrorSentinel:
    def test_unavailable_is_zeroed(self) -> None:
        result = AnalysisResult.unavailable("missing.bin", "No such file or directory")
        assert result.is_error
        assert result.classification is Classification.ERROR
        assert result.total_entropy == 0.0
        assert result.file_size == 0
        assert result.block_entropies == ()
        assert result.high_entropy_block_count == 0
        assert result.error == "No such file or directory"

    def test_distinct_from_zero_entropy_file(self) -> None:
        sentinel = AnalysisResult.unavailable("x", "denied")
        genuine = analyze(b"", 256, source="x")
        assert sentinel != genuine
        assert sentinel.classification is not genuine.classification
        assert genuine.error is None and not genuine.is_error

    def test_empty_source_label_accepted(self) -> None:
        result = AnalysisResult.unavailable("", "No such file or directory")
        assert result.source == ""
        assert result.is_error

    def test_error_requires_reason(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(source="x", classification="error")

    def test_error_requires_zeroed_fields(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(source="x", classification="error", error="boom", file_size=3)

    def test_reason_only_on_errors(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(source="x", classification="plaintext", error="boom")
