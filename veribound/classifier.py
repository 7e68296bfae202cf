"""
Classifier — maps a value to exactly one category.

classify() does not re-validate the boundary set on each call; run
require_well_formed() once at configuration load and classify against the
result. The scan is linear in boundary count, which stays in the low tens.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Union

from .boundaries import BoundarySet, ValidatedBoundarySet
from .errors import Unclassified

BoundarySource = Union[BoundarySet, ValidatedBoundarySet]


def _boundaries_of(source: BoundarySource) -> BoundarySet:
    if isinstance(source, ValidatedBoundarySet):
        return source.boundary_set
    return source


def classify(source: BoundarySource, value: float) -> Optional[str]:
    """
    Return the category of the first boundary containing value.

    Boundaries are half-open [lower, upper) except the last, which is
    closed. Returns None (Unclassified) if nothing matches; NaN never matches.
    """
    boundary_set = _boundaries_of(source)
    if isinstance(value, float) and math.isnan(value):
        return None

    last = len(boundary_set) - 1
    for index, boundary in enumerate(boundary_set.boundaries):
        if boundary.contains(value, closed_upper=(index == last)):
            return boundary.category
    return None


def classify_or_raise(source: BoundarySource, value: float) -> str:
    """
    Classify value, treating an unmatched value as fatal.

    Raises:
        Unclassified: If value falls outside every boundary
    """
    category = classify(source, value)
    if category is None:
        raise Unclassified(value)
    return category


def classify_many(source: BoundarySource, values: Iterable[float]) -> list[Optional[str]]:
    """Classify a batch of independent values."""
    return [classify(source, value) for value in values]
