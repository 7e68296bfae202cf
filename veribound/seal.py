"""
Seal Engine — tamper-evident digests over result payloads.

A seal is SHA-256 over the canonical serialization of a results payload.
verify() recomputes it and compares with exact string equality.

CANONICAL SERIALIZATION:
    json.dumps(results, sort_keys=True, separators=(",", ":"),
               ensure_ascii=False, allow_nan=False) encoded as UTF-8.

    - Keys are sorted, so in-memory field order never matters
    - No whitespace anywhere
    - Floats use Python's shortest round-trip repr; 1 and 1.0 differ
    - Tuples serialize as arrays
    - NaN, Infinity and non-JSON values are rejected
    - Mapping keys must be strings; json would otherwise coerce 1 to "1"

    Verification re-canonicalizes the reloaded payload, so pretty-printing
    or key reordering by the storage layer cannot cause a false tamper report.

SECURITY NOTE:
    The seal is a content-integrity mechanism only. It does not bind the
    sealer's identity. irrational_signature is a fixed placeholder constant,
    not a signature, and is never validated.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional

from .errors import ParseError, SealMismatch, SerializationError

logger = logging.getLogger(__name__)


# Reserved for future signature material; carries no security meaning.
SIGNATURE_PLACEHOLDER = math.pi

SEAL_HASH_PATTERN = re.compile(r"^[0-9a-f]{64}$")


# =============================================================================
# DIGEST AND CANONICAL FORM
# =============================================================================

def compute_digest(data: bytes) -> str:
    """SHA-256 of data as 64 lowercase hex characters."""
    return hashlib.sha256(data).hexdigest()


def _require_string_keys(value: Any) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(
                    f"payload has no canonical form: key {key!r} is not a string"
                )
            _require_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _require_string_keys(item)


def canonical_serialize(results: Any) -> bytes:
    """
    Convert a results payload into its single canonical byte form.

    Raises:
        SerializationError: If the payload is not representable as strict JSON
    """
    _require_string_keys(results)
    try:
        text = json.dumps(
            results,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"payload has no canonical form: {e}") from e
    return text.encode("utf-8")


def compute_seal_hash(results: Any) -> str:
    """Digest of the canonical serialization of results."""
    return compute_digest(canonical_serialize(results))


# =============================================================================
# SEALED RECORD
# =============================================================================

@dataclass(frozen=True)
class SealedRecord:
    """
    A results payload together with its seal.

    Invariant at creation: seal_hash == compute_seal_hash(results).
    Once the record leaves process memory that invariant is only
    re-established by verify().
    """
    results: Any
    seal_hash: str
    irrational_signature: Optional[float] = SIGNATURE_PLACEHOLDER

    def to_dict(self) -> dict:
        """Persisted layout."""
        return {
            "results": self.results,
            "seal_hash": self.seal_hash,
            "irrational_signature": self.irrational_signature,
        }


def record_from_dict(data: Any) -> SealedRecord:
    """
    Parse the persisted layout into a SealedRecord.

    Raises:
        ParseError: If required fields are missing or mistyped
    """
    if not isinstance(data, Mapping):
        raise ParseError(
            f"sealed record must be a JSON object, got {type(data).__name__}"
        )

    if "results" not in data:
        raise ParseError("sealed record missing required field: results")

    seal_hash = data.get("seal_hash")
    if seal_hash is None:
        raise ParseError("sealed record missing required field: seal_hash")
    if not isinstance(seal_hash, str) or not SEAL_HASH_PATTERN.match(seal_hash):
        raise ParseError("seal_hash is not a 64-character lowercase hex digest")

    signature = data.get("irrational_signature")
    if signature is not None and (
        isinstance(signature, bool) or not isinstance(signature, (int, float))
    ):
        raise ParseError("irrational_signature must be a number")

    return SealedRecord(
        results=data["results"],
        seal_hash=seal_hash,
        irrational_signature=signature,
    )


# =============================================================================
# SEAL / VERIFY
# =============================================================================

class Verdict(NamedTuple):
    """Outcome of verify(); a mismatch is a normal result, not an error."""
    ok: bool
    message: str


def seal(results: Any) -> SealedRecord:
    """
    Seal a results payload.

    The record holds a normalized copy decoded from the canonical bytes,
    so later mutation of the caller's object cannot break the seal.

    Raises:
        SerializationError: If the payload has no canonical form
    """
    canonical = canonical_serialize(results)
    seal_hash = compute_digest(canonical)
    logger.debug("Sealed %d canonical bytes: %s", len(canonical), seal_hash)

    return SealedRecord(
        results=json.loads(canonical.decode("utf-8")),
        seal_hash=seal_hash,
        irrational_signature=SIGNATURE_PLACEHOLDER,
    )


def verify(record: SealedRecord) -> Verdict:
    """
    Recompute the seal over record.results and compare with record.seal_hash.

    Never raises for a mismatch. A payload that cannot be canonicalized
    is reported as invalid.
    """
    try:
        actual = compute_seal_hash(record.results)
    except SerializationError as e:
        return Verdict(False, f"INVALID: {e.reason}")

    if actual == record.seal_hash:
        return Verdict(True, f"VERIFIED: seal {record.seal_hash} matches results")

    logger.debug("Seal mismatch: stored=%s recomputed=%s", record.seal_hash, actual)
    return Verdict(
        False,
        f"TAMPERED: seal {record.seal_hash} does not match results "
        f"(recomputed {actual})",
    )


def require_verified(record: SealedRecord) -> SealedRecord:
    """
    Verify a record and raise if it does not hold.

    Raises:
        SealMismatch: If the recomputed digest differs
        SerializationError: If the payload has no canonical form
    """
    actual = compute_seal_hash(record.results)
    if actual != record.seal_hash:
        raise SealMismatch(expected=record.seal_hash, actual=actual)
    return record
