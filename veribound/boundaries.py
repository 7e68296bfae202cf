"""
Boundary Algebra for VeriBound.

A Boundary is a labeled numeric interval. A BoundarySet is an ordered,
immutable collection of boundaries together with the three well-formedness
checks that must pass before the set is used for classification:

    1. Mutual exclusion     — adjacent boundaries never overlap
    2. Complete coverage    — the set spans [global_lower, global_upper]
    3. Classification soundness — a sampled value matches exactly one boundary

MEMBERSHIP RULE:
    Every boundary is half-open [lower, upper) except the last boundary in
    sorted order, which is closed [lower, upper]. Touching boundaries
    (b1.upper == b2.lower) are therefore mutually exclusive, and the shared
    endpoint belongs to the upper boundary.

Verification results are computed on every call and never cached.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .errors import BoundarySetInvalid, MalformedBoundary

logger = logging.getLogger(__name__)


# =============================================================================
# BOUNDARY
# =============================================================================

@dataclass(frozen=True)
class Boundary:
    """
    A single labeled numeric interval.

    Invariants enforced:
    1. lower and upper are numbers, not NaN
    2. lower <= upper (zero-width is permitted)
    3. category is a non-empty string
    """
    lower: float
    upper: float
    category: str

    def __post_init__(self):
        """Enforce invariants at construction time."""
        for name in ("lower", "upper"):
            bound = getattr(self, name)
            if isinstance(bound, bool) or not isinstance(bound, (int, float)):
                raise MalformedBoundary(
                    f"{name} must be a number, got {type(bound).__name__}"
                )
            if math.isnan(bound):
                raise MalformedBoundary(f"{name} must not be NaN")

        if self.lower > self.upper:
            raise MalformedBoundary(
                f"lower {self.lower} is greater than upper {self.upper} "
                f"for category '{self.category}'"
            )

        if not isinstance(self.category, str) or not self.category:
            raise MalformedBoundary("category must be a non-empty string")

    def contains(self, value: float, closed_upper: bool = False) -> bool:
        """Check membership; the upper end is excluded unless closed_upper."""
        if closed_upper:
            return self.lower <= value <= self.upper
        return self.lower <= value < self.upper

    def width(self) -> float:
        return self.upper - self.lower


# =============================================================================
# BOUNDARY SET
# =============================================================================

def _sort_key(boundary: Boundary) -> tuple[float, float]:
    # sorted() is stable, so equal keys keep their input order
    return (boundary.lower, boundary.upper)


@dataclass(frozen=True)
class BoundarySet:
    """
    An ordered, immutable collection of boundaries.

    Always construct through build(); the boundaries tuple is assumed to
    already be in (lower, upper, input order) order.
    """
    boundaries: tuple[Boundary, ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, boundaries: Iterable[Boundary]) -> BoundarySet:
        """
        Sort boundaries into canonical order.

        Raises:
            MalformedBoundary: If any element is not a Boundary
        """
        items = list(boundaries)
        for item in items:
            if not isinstance(item, Boundary):
                raise MalformedBoundary(
                    f"expected Boundary, got {type(item).__name__}"
                )
        return cls(boundaries=tuple(sorted(items, key=_sort_key)))

    def __len__(self) -> int:
        return len(self.boundaries)

    def __iter__(self):
        return iter(self.boundaries)

    def is_empty(self) -> bool:
        return not self.boundaries

    def matching(self, value: float) -> tuple[Boundary, ...]:
        """Return every boundary whose interval contains value."""
        last = len(self.boundaries) - 1
        return tuple(
            boundary
            for index, boundary in enumerate(self.boundaries)
            if boundary.contains(value, closed_upper=(index == last))
        )

    def categories(self) -> list[str]:
        return [boundary.category for boundary in self.boundaries]


def build_boundary_set(boundaries: Iterable[Boundary]) -> BoundarySet:
    """Construct a BoundarySet; see BoundarySet.build."""
    return BoundarySet.build(boundaries)


# =============================================================================
# WELL-FORMEDNESS CHECKS
# =============================================================================

def check_mutual_exclusion(boundary_set: BoundarySet) -> bool:
    """
    True iff b[i].upper <= b[i+1].lower for every adjacent pair.

    Empty and single-element sets trivially satisfy this.
    """
    items = boundary_set.boundaries
    for current, following in zip(items, items[1:]):
        if current.upper > following.lower:
            logger.debug(
                "Overlap: '%s' [%s, %s] and '%s' [%s, %s]",
                current.category, current.lower, current.upper,
                following.category, following.lower, following.upper,
            )
            return False
    return True


def check_complete_coverage(
    boundary_set: BoundarySet,
    global_lower: float,
    global_upper: float,
) -> bool:
    """
    True iff the first lower <= global_lower and the last upper >= global_upper.

    An empty set covers nothing. Interior gaps are not detected here;
    they surface through classification soundness samples.
    """
    if boundary_set.is_empty():
        return False
    first = boundary_set.boundaries[0]
    last = boundary_set.boundaries[-1]
    return first.lower <= global_lower and last.upper >= global_upper


def check_classification_soundness(boundary_set: BoundarySet, value: float) -> bool:
    """True iff exactly one boundary contains value."""
    return len(boundary_set.matching(value)) == 1


# =============================================================================
# VERIFICATION REPORT
# =============================================================================

def representative_values(
    boundary_set: BoundarySet,
    global_lower: float,
    global_upper: float,
) -> list[float]:
    """
    Derive sample values for classification soundness.

    Samples every endpoint and midpoint inside [global_lower, global_upper]
    plus both global endpoints. Sampling each upper endpoint exposes any gap
    between adjacent boundaries.
    """
    candidates = [global_lower, global_upper]
    for boundary in boundary_set:
        candidates.extend([boundary.lower, boundary.upper])
        if math.isfinite(boundary.lower) and math.isfinite(boundary.upper):
            candidates.append(boundary.lower + boundary.width() / 2)

    samples = sorted({
        value for value in candidates
        if math.isfinite(value) and global_lower <= value <= global_upper
    })
    return samples


@dataclass(frozen=True)
class BoundaryReport:
    """Outcome of running all three checks against one boundary set."""
    mutual_exclusion: bool
    complete_coverage: bool
    soundness: tuple[tuple[float, bool], ...]
    global_lower: float
    global_upper: float

    @property
    def classification_soundness(self) -> bool:
        return all(ok for _, ok in self.soundness)

    @property
    def well_formed(self) -> bool:
        return (
            self.mutual_exclusion
            and self.complete_coverage
            and self.classification_soundness
        )

    def unsound_values(self) -> list[float]:
        return [value for value, ok in self.soundness if not ok]

    def failed_checks(self) -> tuple[str, ...]:
        failed = []
        if not self.mutual_exclusion:
            failed.append("mutual_exclusion")
        if not self.complete_coverage:
            failed.append("complete_coverage")
        if not self.classification_soundness:
            failed.append("classification_soundness")
        return tuple(failed)


def verify_boundary_set(
    boundary_set: BoundarySet,
    global_lower: float,
    global_upper: float,
    sample_values: Optional[Sequence[float]] = None,
) -> BoundaryReport:
    """
    Run every well-formedness check and collect the results.

    Raises:
        BoundarySetInvalid: If the global range itself is inverted or NaN
    """
    if math.isnan(global_lower) or math.isnan(global_upper):
        raise BoundarySetInvalid("global range must not contain NaN")
    if global_lower > global_upper:
        raise BoundarySetInvalid(
            f"global_lower {global_lower} is greater than global_upper {global_upper}"
        )

    if sample_values is None:
        sample_values = representative_values(boundary_set, global_lower, global_upper)

    report = BoundaryReport(
        mutual_exclusion=check_mutual_exclusion(boundary_set),
        complete_coverage=check_complete_coverage(
            boundary_set, global_lower, global_upper
        ),
        soundness=tuple(
            (value, check_classification_soundness(boundary_set, value))
            for value in sample_values
        ),
        global_lower=global_lower,
        global_upper=global_upper,
    )

    logger.debug(
        "Verified %d boundaries over [%s, %s]: failed=%s",
        len(boundary_set), global_lower, global_upper, report.failed_checks(),
    )
    return report


# =============================================================================
# VALIDATED BOUNDARY SET
# =============================================================================

@dataclass(frozen=True)
class ValidatedBoundarySet:
    """
    A boundary set that has passed every well-formedness check.

    Only produced by require_well_formed(). Classification and the report
    pipeline accept nothing else.
    """
    boundary_set: BoundarySet
    global_lower: float
    global_upper: float
    report: BoundaryReport

    def __iter__(self):
        return iter(self.boundary_set)

    def __len__(self) -> int:
        return len(self.boundary_set)


def require_well_formed(
    boundary_set: BoundarySet,
    global_lower: float,
    global_upper: float,
    sample_values: Optional[Sequence[float]] = None,
) -> ValidatedBoundarySet:
    """
    Verify a boundary set and fail fast if it is unsound.

    Raises:
        BoundarySetInvalid: If any check fails
    """
    report = verify_boundary_set(boundary_set, global_lower, global_upper, sample_values)

    if not report.well_formed:
        failed = report.failed_checks()
        reason = f"boundary set failed: {', '.join(failed)}"
        unsound = report.unsound_values()
        if unsound:
            reason += f" (ambiguous or unmatched at {unsound})"
        raise BoundarySetInvalid(reason, failed_checks=failed)

    return ValidatedBoundarySet(
        boundary_set=boundary_set,
        global_lower=global_lower,
        global_upper=global_upper,
        report=report,
    )
