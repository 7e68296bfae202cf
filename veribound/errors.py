"""
Error kinds for the VeriBound engine.

Every failure path is a terminal abort of the current operation.
Nothing here is retried: a malformed boundary, an unsound boundary set,
or a digest mismatch is deterministic and will not resolve on retry.

Error Kinds:
    MALFORMED_BOUNDARY    — lower > upper (or an unorderable bound)
    BOUNDARY_SET_INVALID  — a well-formedness check failed
    UNCLASSIFIED          — value outside every boundary
    VALIDATION            — missing / non-numeric input, bad denominator
    PARSE                 — malformed persisted record or input file
    SEAL_MISMATCH         — recomputed digest differs from stored seal
    SERIALIZATION         — payload has no canonical byte form
    STORAGE               — output directory or file cannot be written
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """The closed set of failure kinds surfaced by the engine."""
    MALFORMED_BOUNDARY = "malformed_boundary"
    BOUNDARY_SET_INVALID = "boundary_set_invalid"
    UNCLASSIFIED = "unclassified"
    VALIDATION = "validation"
    PARSE = "parse"
    SEAL_MISMATCH = "seal_mismatch"
    SERIALIZATION = "serialization"
    STORAGE = "storage"


class VeriBoundError(Exception):
    """Base class for every error raised by the engine."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"[{self.kind.value}] {reason}")


class MalformedBoundary(VeriBoundError):
    """Raised at construction time when a boundary cannot be an interval."""
    kind = ErrorKind.MALFORMED_BOUNDARY


class BoundarySetInvalid(VeriBoundError):
    """
    Raised when a boundary set fails a well-formedness check.

    Fatal to classification, not to the process.
    """
    kind = ErrorKind.BOUNDARY_SET_INVALID

    def __init__(self, reason: str, failed_checks: tuple[str, ...] = ()):
        self.failed_checks = failed_checks
        super().__init__(reason)


class Unclassified(VeriBoundError):
    """Raised only by callers that treat an unmatched value as fatal."""
    kind = ErrorKind.UNCLASSIFIED

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"value {value!r} falls outside every boundary")


class ValidationError(VeriBoundError):
    """Raised for missing or invalid numeric inputs."""
    kind = ErrorKind.VALIDATION


class ParseError(VeriBoundError):
    """Raised when a persisted record or input file cannot be read."""
    kind = ErrorKind.PARSE


class SealMismatch(VeriBoundError):
    """Raised by callers that require a verified seal and did not get one."""
    kind = ErrorKind.SEAL_MISMATCH

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"seal hash mismatch: stored {expected}, recomputed {actual}"
        )


class SerializationError(VeriBoundError):
    """Raised when a results payload has no canonical JSON form."""
    kind = ErrorKind.SERIALIZATION


class StorageError(VeriBoundError):
    """Raised when a report cannot be written to disk."""
    kind = ErrorKind.STORAGE
