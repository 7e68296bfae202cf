"""
Report Pipeline for VeriBound.

Composes a domain computation, optional classification, and the seal
engine into a sealed, persisted, re-verified record.

Pipeline stages:
    RECEIVED -> COMPUTED -> SEALED -> PERSISTED -> RELOADED -> VERIFIED

No stage is retried. Each stage either completes and hands off, or fails
terminally for that invocation. Validation and configuration errors abort
before sealing, so an invalid result is never persisted as if it were sealed.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from ..boundaries import ValidatedBoundarySet
from ..classifier import classify
from ..config import SEALED_REPORT_FILENAME
from ..errors import BoundarySetInvalid, ValidationError
from ..regimes.basel import cet1_ratio_percent, compute_basel_report
from ..seal import SealedRecord, Verdict, seal, verify
from ..storage import PathLike, ensure_dir, load_sealed_record, read_json, save_sealed_record

logger = logging.getLogger(__name__)


# =============================================================================
# PIPELINE STATE
# =============================================================================

class PipelineStage(Enum):
    """The last stage a pipeline run completed."""
    RECEIVED = "received"
    COMPUTED = "computed"
    SEALED = "sealed"
    PERSISTED = "persisted"
    RELOADED = "reloaded"
    VERIFIED = "verified"


@dataclass
class PipelineResult:
    """
    Complete result of one report pipeline run.

    Exposes:
    - The stage reached
    - The sealed record and where it was written
    - The verdict from re-verifying the reloaded record
    """
    stage: PipelineStage
    record: Optional[SealedRecord] = None
    output_path: Optional[Path] = None
    verdict: Optional[Verdict] = None

    @property
    def ok(self) -> bool:
        return self.stage is PipelineStage.VERIFIED and bool(self.verdict and self.verdict.ok)


# =============================================================================
# PURE COMPOSITION
# =============================================================================

def build_sealed_report(
    computed: Mapping[str, Any],
    boundaries: Optional[ValidatedBoundarySet] = None,
    value: Optional[float] = None,
) -> SealedRecord:
    """
    Seal a computed result, optionally adding its classification.

    Raises:
        BoundarySetInvalid: If boundaries were not verified first
        ValidationError: If boundaries are given without a value
        SerializationError: If the payload has no canonical form
    """
    if not isinstance(computed, Mapping):
        raise ValidationError("computed result must be a mapping")

    payload = copy.deepcopy(dict(computed))

    if boundaries is not None:
        if not isinstance(boundaries, ValidatedBoundarySet):
            raise BoundarySetInvalid(
                "refusing to classify against an unverified boundary set"
            )
        if value is None:
            raise ValidationError("a value is required for classification")

        category = classify(boundaries, value)
        payload["classification"] = {
            "value": value,
            "category": category,
            "classified": category is not None,
        }

    return seal(payload)


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================

def _enter(stage: PipelineStage) -> None:
    logger.debug("Pipeline stage: %s", stage.value)


def verify_sealed_file(path: PathLike) -> Verdict:
    """
    Load a sealed record and verify it.

    Raises:
        ParseError: If the file is missing or malformed
    """
    return verify(load_sealed_record(path))


def run_basel_report(
    input_path: PathLike,
    output_dir: PathLike,
    boundaries: Optional[ValidatedBoundarySet] = None,
) -> PipelineResult:
    """
    Run the Basel III report end to end.

    Stages:
        1. Read raw inputs
        2. Compute the capital adequacy result
        3. Seal (with CET1 band classification if boundaries are given)
        4. Persist to <output_dir>/basel_report_sealed.json
        5. Reload and verify

    Raises:
        ParseError: If the input file cannot be read
        ValidationError: If the inputs are invalid
    """
    inputs = read_json(input_path)
    _enter(PipelineStage.RECEIVED)

    computed = compute_basel_report(inputs)
    _enter(PipelineStage.COMPUTED)
    logger.info("Computed %s: status=%s", computed["regime"], computed["status"])

    value = cet1_ratio_percent(computed) if boundaries is not None else None
    record = build_sealed_report(computed, boundaries, value)
    _enter(PipelineStage.SEALED)

    ensure_dir(output_dir)
    output_path = save_sealed_record(record, Path(output_dir) / SEALED_REPORT_FILENAME)
    _enter(PipelineStage.PERSISTED)

    reloaded = load_sealed_record(output_path)
    _enter(PipelineStage.RELOADED)

    verdict = verify(reloaded)
    stage = PipelineStage.VERIFIED if verdict.ok else PipelineStage.RELOADED
    _enter(stage)

    return PipelineResult(
        stage=stage,
        record=reloaded,
        output_path=output_path,
        verdict=verdict,
    )
