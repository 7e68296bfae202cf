"""
Tests for the Report Pipeline.

These tests verify:
1. Pure composition of computed results, classification, and seal
2. The full RECEIVED -> VERIFIED flow against the filesystem
3. Invalid inputs never produce a persisted sealed record
4. Tampering with a persisted record is detected after reload
"""

import json

import pytest

from veribound.boundaries import Boundary, BoundarySet
from veribound.cli.pipeline import (
    PipelineResult,
    PipelineStage,
    build_sealed_report,
    run_basel_report,
    verify_sealed_file,
)
from veribound.config import SEALED_REPORT_FILENAME
from veribound.errors import BoundarySetInvalid, ParseError, ValidationError
from veribound.regimes.basel import compute_basel_report, default_capital_bands
from veribound.seal import verify


VALID_INPUTS = {
    "cet1_capital": 75,
    "risk_weighted_assets": 1000,
    "threshold": 0.045,
}


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps(VALID_INPUTS), encoding="utf-8")
    return path


# =============================================================================
# PURE COMPOSITION
# =============================================================================

class TestBuildSealedReport:
    """Test sealing of computed results."""

    def test_without_classification(self):
        """Without boundaries the payload is sealed unchanged."""
        computed = compute_basel_report(VALID_INPUTS)
        record = build_sealed_report(computed)

        assert "classification" not in record.results
        assert record.results == computed
        assert verify(record).ok

    def test_with_classification(self):
        """With boundaries the classification is sealed too."""
        record = build_sealed_report(
            {"status": "PASS"}, boundaries=default_capital_bands(), value=7.5,
        )
        assert record.results["classification"] == {
            "value": 7.5,
            "category": "Adequate",
            "classified": True,
        }
        assert verify(record).ok

    def test_unclassified_value_still_sealed(self):
        """An unclassified value is recorded, not fatal."""
        record = build_sealed_report(
            {"status": "PASS"}, boundaries=default_capital_bands(), value=150.0,
        )
        assert record.results["classification"]["category"] is None
        assert record.results["classification"]["classified"] is False
        assert verify(record).ok

    def test_unverified_boundary_set_refused(self):
        """A raw BoundarySet cannot drive a sealed report."""
        raw = BoundarySet.build([Boundary(0.0, 100.0, "All")])
        with pytest.raises(BoundarySetInvalid, match="unverified"):
            build_sealed_report({"status": "PASS"}, boundaries=raw, value=5.0)

    def test_value_required_with_boundaries(self):
        """Boundaries without a value are rejected."""
        with pytest.raises(ValidationError, match="value is required"):
            build_sealed_report({"status": "PASS"}, boundaries=default_capital_bands())

    def test_computed_result_not_mutated(self):
        """The caller's result object is left untouched."""
        computed = {"status": "PASS"}
        build_sealed_report(computed, boundaries=default_capital_bands(), value=7.5)
        assert computed == {"status": "PASS"}

    def test_non_mapping_rejected(self):
        """Computed results must be mappings."""
        with pytest.raises(ValidationError, match="mapping"):
            build_sealed_report(["PASS"])


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================

class TestRunBaselReport:
    """Test the full report pipeline."""

    def test_pipeline_verifies(self, input_file, tmp_path):
        """A valid run reaches the VERIFIED stage."""
        out_dir = tmp_path / "results"
        result = run_basel_report(input_file, out_dir)

        assert isinstance(result, PipelineResult)
        assert result.ok
        assert result.stage is PipelineStage.VERIFIED
        assert result.output_path == out_dir / SEALED_REPORT_FILENAME
        assert result.output_path.exists()
        assert result.record.results["status"] == "PASS"

    def test_persisted_layout(self, input_file, tmp_path):
        """The written file has exactly the sealed-record fields."""
        result = run_basel_report(input_file, tmp_path / "results")
        data = json.loads(result.output_path.read_text(encoding="utf-8"))

        assert set(data) == {"results", "seal_hash", "irrational_signature"}
        assert len(data["seal_hash"]) == 64

    def test_pipeline_with_classification(self, input_file, tmp_path):
        """The CET1 band is included when boundaries are given."""
        result = run_basel_report(input_file, tmp_path / "results", default_capital_bands())
        assert result.ok
        assert result.record.results["classification"]["category"] == "Adequate"

    def test_pipeline_is_deterministic(self, input_file, tmp_path):
        """Same input, same seal."""
        first = run_basel_report(input_file, tmp_path / "one")
        second = run_basel_report(input_file, tmp_path / "two")
        assert first.record.seal_hash == second.record.seal_hash

    def test_invalid_input_never_persisted(self, tmp_path):
        """Validation errors abort before anything is written."""
        input_path = tmp_path / "input.json"
        input_path.write_text(
            json.dumps(dict(VALID_INPUTS, risk_weighted_assets=0)), encoding="utf-8",
        )
        out_dir = tmp_path / "results"

        with pytest.raises(ValidationError, match="risk_weighted_assets must be > 0"):
            run_basel_report(input_path, out_dir)
        assert not (out_dir / SEALED_REPORT_FILENAME).exists()

    def test_malformed_input_file(self, tmp_path):
        """An unreadable input file is a parse error."""
        input_path = tmp_path / "input.json"
        input_path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ParseError):
            run_basel_report(input_path, tmp_path / "results")


class TestVerifySealedFile:
    """Test reload-and-verify of persisted records."""

    def test_untouched_file_verifies(self, input_file, tmp_path):
        """A freshly written report verifies."""
        result = run_basel_report(input_file, tmp_path / "results")
        assert verify_sealed_file(result.output_path).ok

    def test_tampered_file_detected(self, input_file, tmp_path):
        """Editing the written ratio is reported as tampering."""
        result = run_basel_report(input_file, tmp_path / "results")

        data = json.loads(result.output_path.read_text(encoding="utf-8"))
        data["results"]["computed"]["cet1_ratio"] = 0.085
        result.output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

        verdict = verify_sealed_file(result.output_path)
        assert verdict.ok is False
        assert verdict.message.startswith("TAMPERED")

    def test_reformatted_file_still_verifies(self, input_file, tmp_path):
        """Compact, reordered JSON is the same logical payload."""
        result = run_basel_report(input_file, tmp_path / "results")

        data = json.loads(result.output_path.read_text(encoding="utf-8"))
        reordered = {key: data[key] for key in reversed(list(data))}
        result.output_path.write_text(json.dumps(reordered, sort_keys=True), encoding="utf-8")

        assert verify_sealed_file(result.output_path).ok
