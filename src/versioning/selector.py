"""Version selection over an already-fetched candidate set.

Everything here is pure: the candidate set is never mutated and repeated
calls with the same inputs return the same answer.
"""

from __future__ import annotations

import logging
from typing import Collection, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from ordering import InvalidSegmentError, VersionComparator, get_version_comparator
from ordering.tokens import ArtifactVersion

from .models import Coordinate, QualifierFilter, Restriction, VersionRange

logger = logging.getLogger(__name__)


def is_snapshot(version: str) -> bool:
    """True for ``-SNAPSHOT`` and timestamped snapshot versions."""
    return ArtifactVersion.parse(version).is_snapshot


def decrement(version: str) -> str:
    """Step the major/minor/incremental triple one unit down.

    The rightmost non-zero component among incremental, minor and major is
    decremented; ``0.0.0`` is returned unchanged.
    """
    parsed = ArtifactVersion.parse(version)
    major, minor, incremental = parsed.major, parsed.minor, parsed.incremental
    if incremental > 0:
        incremental -= 1
    elif minor > 0:
        minor -= 1
    elif major > 0:
        major -= 1
    return f"{major}.{minor}.{incremental}"


def _filter(
    candidates: Iterable[str],
    qualifier_filter: Optional[QualifierFilter],
    allow_snapshots: bool,
) -> List[str]:
    survivors = []
    for candidate in candidates:
        if not allow_snapshots and is_snapshot(candidate):
            continue
        if qualifier_filter is not None and not qualifier_filter.matches_version(candidate):
            continue
        survivors.append(candidate)
    return survivors


def select_qualified_release(
    candidates: Collection[str],
    comparator: VersionComparator,
    target: str,
    qualifier_filter: Optional[QualifierFilter] = None,
    allow_snapshots: bool = True,
) -> Optional[str]:
    """Newest qualified release of ``target`` such as ``2.0.0-beta``.

    Searches the open window ``(decrement(target), target)`` so that the
    previous release and ``target`` itself are both excluded.
    """
    lower = decrement(target)
    if comparator.compare(lower, target) >= 0:
        return None
    window = Restriction(lower, False, target, False)
    in_window = [c for c in candidates if window.contains(c, comparator)]
    survivors = _filter(in_window, qualifier_filter, allow_snapshots)
    if is_debug_enabled(logger):
        logger.debug(
            "Qualified release window",
            extra=extra_context(
                event="decision", component="selector", action="qualified_window",
                target=target, window=str(window), candidates=len(candidates), survivors=len(survivors),
            ),
        )
    return comparator.max(survivors)


def select(
    candidates: Collection[str],
    comparator: Optional[VersionComparator] = None,
    exact_target: Optional[str] = None,
    version_range: Optional[VersionRange] = None,
    qualifier_filter: Optional[QualifierFilter] = None,
    qualified_release_search: bool = False,
    allow_snapshots: bool = True,
) -> Optional[str]:
    """Pick a version from ``candidates`` or return None when nothing fits.

    A range, when given, restricts every later step. With ``exact_target``
    a single candidate equal to it under the comparator wins outright;
    otherwise, if requested and the target is a plain release, the newest
    qualified pre-release of it is searched. Without a target the newest
    candidate passing the qualifier filter and snapshot policy is returned.
    """
    comparator = comparator or get_version_comparator()
    pool = list(candidates)
    if version_range is not None:
        pool = [c for c in pool if version_range.contains(c)]

    if exact_target is not None:
        matches = [c for c in pool if comparator.equals(c, exact_target)]
        if len(matches) == 1:
            return matches[0]
        if not qualified_release_search:
            return None
        parsed = ArtifactVersion.parse(exact_target)
        if parsed.qualifier or parsed.build_number:
            return None
        return select_qualified_release(pool, comparator, exact_target, qualifier_filter, allow_snapshots)

    return comparator.max(_filter(pool, qualifier_filter, allow_snapshots))


def _updates_segment(base: ArtifactVersion, candidate: ArtifactVersion, segment: int) -> bool:
    """True when ``candidate`` keeps the components before ``segment`` and raises the one at it."""
    def component(parsed: ArtifactVersion, index: int) -> int:
        return parsed.components[index] if len(parsed.components) > index else 0

    if any(component(base, i) != component(candidate, i) for i in range(segment)):
        return False
    return component(candidate, segment) > component(base, segment)


class ArtifactVersions:
    """Read-only view of the known versions of one coordinate."""

    def __init__(self, coordinate: Coordinate, versions: Iterable[str], comparator: Optional[VersionComparator] = None):
        self.coordinate = coordinate
        self.comparator = comparator or get_version_comparator()
        self._versions = frozenset(versions)

    @property
    def versions(self) -> List[str]:
        """All known versions, ascending."""
        return self.comparator.sort(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, version: object) -> bool:
        return version in self._versions

    def get_versions(
        self,
        version_range: Optional[VersionRange] = None,
        lower: Optional[str] = None,
        upper: Optional[str] = None,
        include_lower: bool = False,
        include_upper: bool = False,
        include_snapshots: bool = False,
    ) -> List[str]:
        """Versions inside the range and/or explicit bounds, ascending."""
        bounds = Restriction(lower, include_lower, upper, include_upper)
        result = []
        for version in self._versions:
            if not include_snapshots and is_snapshot(version):
                continue
            if version_range is not None and not version_range.contains(version):
                continue
            if not bounds.contains(version, self.comparator):
                continue
            result.append(version)
        return self.comparator.sort(result)

    def get_newest_update(self, current: str, segment: int, include_snapshots: bool = False) -> Optional[str]:
        """Newest version that changes ``segment`` but nothing more significant.

        Segment 0 allows any newer major version, segment 1 a newer minor
        within the same major, and so on. Membership is decided on the
        numeric components, missing components counting as 0, so ``2.0.0``
        is not a minor update of ``1.0`` and ``1.1.0`` is.
        """
        count = self.comparator.segment_count(current)
        if segment < 0 or segment >= count:
            raise InvalidSegmentError(f"Invalid segment {segment} for version '{current}' ({count} segments)")
        base = ArtifactVersion.parse(current)
        found = []
        for version in self._versions:
            if not include_snapshots and is_snapshot(version):
                continue
            if _updates_segment(base, ArtifactVersion.parse(version), segment):
                found.append(version)
        return self.comparator.max(found)

    def __repr__(self) -> str:
        return f"ArtifactVersions({self.coordinate}, {len(self._versions)} versions)"
