"""Default Maven comparison strategy over parsed ``ArtifactVersion`` values."""

from __future__ import annotations

from typing import Tuple

from .base import VersionComparator
from .tokens import ArtifactVersion, alpha_num_increment, qualifier_key


def _strip_trailing_zeros(components: Tuple[int, ...]) -> Tuple[int, ...]:
    end = len(components)
    while end and components[end - 1] == 0:
        end -= 1
    return components[:end]


def maven_sort_key(version: ArtifactVersion) -> tuple:
    """Ordering key for a parsed version.

    Missing numeric components count as zero, then the qualifier rank
    decides, then the build number. When everything else ties the version
    with fewer explicit components is the newer one ("1" above "1.0").
    """
    rank, number, text = qualifier_key(version.qualifier)
    return (
        _strip_trailing_zeros(version.components),
        rank,
        number,
        text,
        version.build_number,
        -len(version.components),
    )


class MavenVersionComparator(VersionComparator):
    """Major/minor/incremental/build/qualifier ordering."""

    name = "maven"

    def compare(self, a: str, b: str) -> int:
        key_a = maven_sort_key(ArtifactVersion.parse(a))
        key_b = maven_sort_key(ArtifactVersion.parse(b))
        return (key_a > key_b) - (key_a < key_b)

    def segment_count(self, version: str) -> int:
        parsed = ArtifactVersion.parse(version)
        trailing = 1 if parsed.qualifier is not None or parsed.build_number else 0
        return len(parsed.components) + trailing

    def increment_segment(self, version: str, segment: int) -> str:
        self._check_segment(version, segment)
        parsed = ArtifactVersion.parse(version)
        components = list(parsed.components)
        if segment < len(components):
            components[segment] += 1
            for index in range(segment + 1, len(components)):
                components[index] = 0
            return ".".join(str(c) for c in components)

        prefix = ".".join(str(c) for c in components)
        if parsed.qualifier is not None:
            tail = alpha_num_increment(parsed.qualifier)
        else:
            tail = str(parsed.build_number + 1)
        return f"{prefix}-{tail}" if prefix else tail
