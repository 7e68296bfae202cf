"""
Basel III capital adequacy.

Rule:
    CET1 ratio = cet1_capital / risk_weighted_assets
    PASS if CET1 ratio >= threshold, FAIL otherwise

Capital bands (percentage scale, for classification):
    [0.0, 4.5)    -> Critical
    [4.5, 6.0)    -> Watch
    [6.0, 8.0)    -> Adequate
    [8.0, 100.0]  -> Excellent
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from ..boundaries import Boundary, BoundarySet, ValidatedBoundarySet, require_well_formed
from ..errors import ValidationError


REGIME_NAME = "basel_iii_capital_adequacy"
RULE = "CET1_ratio >= threshold"

REQUIRED_FIELDS = ("cet1_capital", "risk_weighted_assets", "threshold")

CAPITAL_BANDS_LOWER = 0.0
CAPITAL_BANDS_UPPER = 100.0

DEFAULT_CAPITAL_BANDS = (
    Boundary(0.0, 4.5, "Critical"),
    Boundary(4.5, 6.0, "Watch"),
    Boundary(6.0, 8.0, "Adequate"),
    Boundary(8.0, 100.0, "Excellent"),
)


def read_float_field(inputs: Mapping[str, Any], field: str) -> float:
    """
    Read a required numeric field; ints are widened to float.

    Raises:
        ValidationError: If the field is missing, null, or not a finite number
    """
    value = inputs.get(field)
    if value is None:
        raise ValidationError(f"Missing required field: {field}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Field is not a number: {field}")
    try:
        value = float(value)
    except OverflowError:
        raise ValidationError(f"Field is not a number: {field}") from None
    if not math.isfinite(value):
        raise ValidationError(f"Field is not a number: {field}")
    return value


def compute_basel_report(inputs: Any) -> dict:
    """
    Compute the Basel III capital adequacy result payload.

    Raises:
        ValidationError: On missing/non-numeric fields or non-positive RWA
    """
    if not isinstance(inputs, Mapping):
        raise ValidationError("Basel input must be a JSON object")

    cet1 = read_float_field(inputs, "cet1_capital")
    rwa = read_float_field(inputs, "risk_weighted_assets")
    threshold = read_float_field(inputs, "threshold")

    if not rwa > 0.0:
        raise ValidationError("risk_weighted_assets must be > 0")

    ratio = cet1 / rwa
    passed = ratio >= threshold

    return {
        "regime": REGIME_NAME,
        "rule": RULE,
        "inputs": {
            "cet1_capital": cet1,
            "risk_weighted_assets": rwa,
            "threshold": threshold,
        },
        "computed": {
            "cet1_ratio": ratio,
        },
        "status": "PASS" if passed else "FAIL",
    }


def cet1_ratio_percent(report: Mapping[str, Any]) -> float:
    """The computed CET1 ratio on the percentage scale used by the bands."""
    return report["computed"]["cet1_ratio"] * 100.0


def default_capital_bands() -> ValidatedBoundarySet:
    """The standard capital bands, verified."""
    return require_well_formed(
        BoundarySet.build(DEFAULT_CAPITAL_BANDS),
        CAPITAL_BANDS_LOWER,
        CAPITAL_BANDS_UPPER,
    )
