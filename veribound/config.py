"""
Configuration for VeriBound.

Two kinds of configuration live here:

    Boundary configuration — a JSON document describing a boundary set and
    the domain's valid input range. Parsed, built, and verified once at
    load time; an unsound set is a hard configuration error.

    Runtime settings — environment variables for the command-line shell.

Boundary configuration layout:
    {
      "global_lower": 0,
      "global_upper": 100,
      "boundaries": [
        {"lower": 0, "upper": 4.5, "category": "Critical"},
        ...
      ],
      "sample_values": [4.5, 7.5]        (optional)
    }
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .boundaries import (
    Boundary,
    BoundarySet,
    ValidatedBoundarySet,
    require_well_formed,
)
from .errors import ValidationError
from .storage import PathLike, read_json

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

DEFAULT_RESULTS_DIR = "results"
DEFAULT_LOG_LEVEL = "WARNING"
SEALED_REPORT_FILENAME = "basel_report_sealed.json"


# =============================================================================
# BOUNDARY CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class BoundaryConfig:
    """A parsed, not yet verified, boundary configuration."""
    boundary_set: BoundarySet
    global_lower: float
    global_upper: float
    sample_values: Optional[tuple[float, ...]] = None

    def validate(self) -> ValidatedBoundarySet:
        """
        Run the well-formedness checks.

        Raises:
            BoundarySetInvalid: If any check fails
        """
        return require_well_formed(
            self.boundary_set,
            self.global_lower,
            self.global_upper,
            self.sample_values,
        )


def _require_number(data: Mapping[str, Any], key: str, where: str) -> float:
    value = data.get(key)
    if value is None:
        raise ValidationError(f"{where}: missing required field: {key}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{where}: field is not a number: {key}")
    return value


def boundaries_from_config(data: Any) -> BoundaryConfig:
    """
    Parse a boundary configuration document.

    Raises:
        ValidationError: If the document has the wrong shape
        MalformedBoundary: If any boundary has lower > upper
    """
    if not isinstance(data, Mapping):
        raise ValidationError("boundary configuration must be a JSON object")

    global_lower = _require_number(data, "global_lower", "configuration")
    global_upper = _require_number(data, "global_upper", "configuration")

    entries = data.get("boundaries")
    if not isinstance(entries, list):
        raise ValidationError("configuration: 'boundaries' must be a list")

    boundaries = []
    for index, entry in enumerate(entries):
        where = f"boundaries[{index}]"
        if not isinstance(entry, Mapping):
            raise ValidationError(f"{where}: must be a JSON object")
        boundaries.append(
            Boundary(
                lower=_require_number(entry, "lower", where),
                upper=_require_number(entry, "upper", where),
                category=entry.get("category", ""),
            )
        )

    samples = data.get("sample_values")
    if samples is not None:
        if not isinstance(samples, list):
            raise ValidationError("configuration: 'sample_values' must be a list")
        samples = tuple(
            _require_number({"value": sample}, "value", f"sample_values[{i}]")
            for i, sample in enumerate(samples)
        )

    return BoundaryConfig(
        boundary_set=BoundarySet.build(boundaries),
        global_lower=global_lower,
        global_upper=global_upper,
        sample_values=samples,
    )


def load_boundary_config(path: PathLike) -> ValidatedBoundarySet:
    """
    Read, parse, and verify a boundary configuration file.

    Raises:
        ParseError: If the file cannot be read as JSON
        ValidationError: If the document has the wrong shape
        MalformedBoundary: If any boundary has lower > upper
        BoundarySetInvalid: If any well-formedness check fails
    """
    config = boundaries_from_config(read_json(path))
    validated = config.validate()
    logger.info(
        "Loaded %d boundaries from %s over [%s, %s]",
        len(validated), path, validated.global_lower, validated.global_upper,
    )
    return validated


# =============================================================================
# RUNTIME SETTINGS
# =============================================================================

@dataclass
class Settings:
    results_dir: Path = Path(DEFAULT_RESULTS_DIR)
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        environ = os.environ

    results_dir = Path(environ.get("VERIBOUND_RESULTS_DIR") or DEFAULT_RESULTS_DIR)
    log_level = (environ.get("VERIBOUND_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()

    return Settings(results_dir=results_dir, log_level=log_level)
