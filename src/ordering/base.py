"""Abstract interface shared by all version comparison strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Iterable, List, Optional


class InvalidSegmentError(IndexError):
    """Raised when a segment index is outside a version's segment range."""


class VersionComparator(ABC):
    """Total ordering over version strings.

    Subclasses implement :meth:`compare`, :meth:`segment_count` and
    :meth:`increment_segment`; everything else derives from ``compare``.
    """

    name = "abstract"

    @abstractmethod
    def compare(self, a: str, b: str) -> int:
        """Return -1, 0 or 1 as ``a`` sorts before, equal to or after ``b``."""

    @abstractmethod
    def segment_count(self, version: str) -> int:
        """Return the number of incrementable segments in ``version``."""

    @abstractmethod
    def increment_segment(self, version: str, segment: int) -> str:
        """Return ``version`` with ``segment`` incremented and later segments reset."""

    def equals(self, a: str, b: str) -> bool:
        """Comparator-relative equality; not the same as string equality."""
        return self.compare(a, b) == 0

    def sort_key(self):
        """Return a key function usable with ``sorted``."""
        return cmp_to_key(self.compare)

    def sort(self, versions: Iterable[str]) -> List[str]:
        """Return ``versions`` in ascending order."""
        return sorted(versions, key=self.sort_key())

    def max(self, versions: Iterable[str]) -> Optional[str]:
        """Return the newest version, or None for an empty input."""
        items = list(versions)
        if not items:
            return None
        return max(items, key=self.sort_key())

    def _check_segment(self, version: str, segment: int) -> None:
        count = self.segment_count(version)
        if segment < 0 or segment >= count:
            raise InvalidSegmentError(
                f"Invalid segment {segment} for version '{version}' ({count} segments)"
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def sign(value: int) -> int:
    """Clamp a comparison result to -1, 0 or 1."""
    if value < 0:
        return -1
    if value > 0:
        return 1
    return 0
