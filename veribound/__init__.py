# VeriBound
# Boundary Algebra & Sealing Engine

"""
Core invariant: a value is classified only against a boundary set that has
been proved well-formed, and every sealed result can later be checked for
tampering.

This package exposes the pure core; file access and the command line live
in storage and cli.
"""

from .boundaries import (
    Boundary,
    BoundaryReport,
    BoundarySet,
    ValidatedBoundarySet,
    build_boundary_set,
    check_classification_soundness,
    check_complete_coverage,
    check_mutual_exclusion,
    require_well_formed,
    verify_boundary_set,
)
from .classifier import classify, classify_many, classify_or_raise
from .errors import (
    BoundarySetInvalid,
    ErrorKind,
    MalformedBoundary,
    ParseError,
    SealMismatch,
    SerializationError,
    StorageError,
    Unclassified,
    ValidationError,
    VeriBoundError,
)
from .seal import (
    SIGNATURE_PLACEHOLDER,
    SealedRecord,
    Verdict,
    canonical_serialize,
    compute_digest,
    seal,
    verify,
)

__version__ = "0.1.0"
