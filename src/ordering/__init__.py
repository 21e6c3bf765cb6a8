"""Version comparison strategies selectable by name."""

from typing import Optional

from constants import ComparisonMethods

from .base import InvalidSegmentError, VersionComparator
from .maven import MavenVersionComparator
from .mercury import MercuryVersionComparator
from .numeric import NumericVersionComparator
from .tokens import ArtifactVersion, alpha_num_increment


def get_version_comparator(comparison_method: Optional[str] = None) -> VersionComparator:
    """Return the comparator for ``comparison_method``.

    "numeric" and "mercury" select those strategies (case-insensitive);
    anything else, including None, selects the default Maven ordering.
    """
    method = (comparison_method or "").strip().lower()
    if method == ComparisonMethods.NUMERIC.value:
        return NumericVersionComparator()
    if method == ComparisonMethods.MERCURY.value:
        return MercuryVersionComparator()
    return MavenVersionComparator()


__all__ = [
    "ArtifactVersion",
    "InvalidSegmentError",
    "MavenVersionComparator",
    "MercuryVersionComparator",
    "NumericVersionComparator",
    "VersionComparator",
    "alpha_num_increment",
    "get_version_comparator",
]
