"""Data models for version selection and POM rewriting."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional, Pattern, Tuple, Union

from ordering import VersionComparator, get_version_comparator
from ordering.tokens import ArtifactVersion


class InvalidVersionSpecificationError(ValueError):
    """Raised when a range expression is malformed or describes an empty range."""


class InvalidQualifierPatternError(ValueError):
    """Raised when a qualifier include/exclude pattern does not compile."""


class ResolutionMode(Enum):
    """How a replacement version was chosen."""
    EXACT = "exact"
    QUALIFIED = "qualified"


@dataclass(frozen=True)
class Coordinate:
    """The (groupId, artifactId) identity of an artifact."""
    group_id: str
    artifact_id: str

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """Parse ``groupId:artifactId``."""
        group_id, sep, artifact_id = text.strip().partition(":")
        if not sep or not group_id or not artifact_id or ":" in artifact_id:
            raise ValueError(f"Invalid coordinate '{text}'. Expected 'groupId:artifactId'.")
        return cls(group_id.strip(), artifact_id.strip())

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


@dataclass(frozen=True)
class Restriction:
    """One interval; a None bound is open-ended."""
    lower: Optional[str] = None
    lower_inclusive: bool = False
    upper: Optional[str] = None
    upper_inclusive: bool = False

    def contains(self, version: str, comparator: VersionComparator) -> bool:
        if self.lower is not None:
            result = comparator.compare(version, self.lower)
            if result < 0 or (result == 0 and not self.lower_inclusive):
                return False
        if self.upper is not None:
            result = comparator.compare(version, self.upper)
            if result > 0 or (result == 0 and not self.upper_inclusive):
                return False
        return True

    def __str__(self) -> str:
        if self.lower is not None and self.lower == self.upper and self.lower_inclusive and self.upper_inclusive:
            return f"[{self.lower}]"
        return "{}{},{}{}".format(
            "[" if self.lower_inclusive else "(",
            self.lower or "",
            self.upper or "",
            "]" if self.upper_inclusive else ")",
        )


@dataclass(frozen=True)
class VersionRange:
    """A union of restrictions evaluated with one comparator.

    Bounds are validated on construction: a lower bound above its upper
    bound, an empty single-point interval or overlapping restrictions raise
    InvalidVersionSpecificationError.
    """
    restrictions: Tuple[Restriction, ...]
    comparator: VersionComparator = field(default_factory=get_version_comparator, compare=False)

    def __post_init__(self):
        if not self.restrictions:
            raise InvalidVersionSpecificationError("A version range needs at least one restriction")
        previous: Optional[Restriction] = None
        for restriction in self.restrictions:
            self._validate(restriction)
            if previous is not None:
                self._validate_order(previous, restriction)
            previous = restriction

    def _validate(self, restriction: Restriction) -> None:
        if restriction.lower is None or restriction.upper is None:
            return
        result = self.comparator.compare(restriction.lower, restriction.upper)
        if result > 0:
            raise InvalidVersionSpecificationError(
                f"Range defies version ordering: {restriction} (lower bound above upper bound)"
            )
        if result == 0 and not (restriction.lower_inclusive and restriction.upper_inclusive):
            raise InvalidVersionSpecificationError(f"Range {restriction} cannot contain any version")

    def _validate_order(self, previous: Restriction, current: Restriction) -> None:
        if previous.upper is None or current.lower is None:
            raise InvalidVersionSpecificationError(f"Ranges overlap: {previous}, {current}")
        result = self.comparator.compare(previous.upper, current.lower)
        if result > 0 or (result == 0 and previous.upper_inclusive and current.lower_inclusive):
            raise InvalidVersionSpecificationError(f"Ranges overlap: {previous}, {current}")

    @classmethod
    def create(cls, spec: str, comparator: Optional[VersionComparator] = None) -> "VersionRange":
        """Build a range from an expression such as ``[1.0,2.0)``."""
        from .parser import parse_restrictions  # pylint: disable=import-outside-toplevel
        return cls(parse_restrictions(spec), comparator or get_version_comparator())

    @classmethod
    def exact(cls, version: str, comparator: Optional[VersionComparator] = None) -> "VersionRange":
        """Single-point range matching versions equal to ``version``."""
        return cls((Restriction(version, True, version, True),), comparator or get_version_comparator())

    @classmethod
    def between(
        cls,
        lower: Optional[str],
        upper: Optional[str],
        include_lower: bool = False,
        include_upper: bool = False,
        comparator: Optional[VersionComparator] = None,
    ) -> "VersionRange":
        """Single interval from explicit bounds."""
        restriction = Restriction(lower, include_lower, upper, include_upper)
        return cls((restriction,), comparator or get_version_comparator())

    def contains(self, version: str) -> bool:
        return any(r.contains(version, self.comparator) for r in self.restrictions)

    def __str__(self) -> str:
        return ",".join(str(r) for r in self.restrictions)


def _compile_patterns(patterns: Iterable[str]) -> Tuple[Pattern[str], ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise InvalidQualifierPatternError(f"Invalid qualifier pattern '{pattern}': {exc}") from exc
    return tuple(compiled)


@dataclass(frozen=True)
class QualifierFilter:
    """Include/exclude regular expressions over the qualifier component.

    Each pattern must match the whole qualifier. Excludes win over includes
    and an empty include list accepts everything not excluded. Releases have
    the empty qualifier.
    """
    includes: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()
    _compiled_includes: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)
    _compiled_excludes: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "includes", tuple(self.includes))
        object.__setattr__(self, "excludes", tuple(self.excludes))
        object.__setattr__(self, "_compiled_includes", _compile_patterns(self.includes))
        object.__setattr__(self, "_compiled_excludes", _compile_patterns(self.excludes))

    @classmethod
    def from_lists(cls, includes_list: Optional[str] = None, excludes_list: Optional[str] = None) -> "QualifierFilter":
        """Build from comma separated pattern lists."""
        from .parser import split_qualifiers  # pylint: disable=import-outside-toplevel
        return cls(split_qualifiers(includes_list), split_qualifiers(excludes_list))

    def matches(self, qualifier: Optional[str]) -> bool:
        text = qualifier or ""
        if any(p.fullmatch(text) for p in self._compiled_excludes):
            return False
        if not self._compiled_includes:
            return True
        return any(p.fullmatch(text) for p in self._compiled_includes)

    def matches_version(self, version: str) -> bool:
        """Apply the filter to the qualifier of ``version``."""
        return self.matches(ArtifactVersion.parse(version).qualifier)


@dataclass(frozen=True)
class Dependency:
    """A dependency declaration read from a POM."""
    coordinate: Coordinate
    version: Optional[str]
    section: str
    path: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.coordinate}:{self.version}" if self.version else str(self.coordinate)


KeyPairs = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class PatchTarget:
    """One textual location to rewrite.

    ``path`` runs from the root element to the element holding the value;
    ``key`` lists sibling child elements (name, text) that disambiguate
    repeated parents; ``expected_old`` guards against stale rewrites.
    """
    path: Tuple[str, ...]
    expected_old: str
    key: KeyPairs = ()

    def __post_init__(self):
        if not self.path:
            raise ValueError("A patch target needs a non-empty element path")
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "key", _key_pairs(self.key))

    @classmethod
    def for_dependency(cls, dependency: Dependency, expected_old: str) -> "PatchTarget":
        return cls(
            path=dependency.path + ("version",),
            expected_old=expected_old,
            key=(("groupId", dependency.coordinate.group_id), ("artifactId", dependency.coordinate.artifact_id)),
        )


def _key_pairs(key: Union[Mapping[str, str], Iterable[Tuple[str, str]], None]) -> KeyPairs:
    if not key:
        return ()
    if isinstance(key, Mapping):
        return tuple(key.items())
    return tuple((name, value) for name, value in key)


@dataclass
class UpdateResult:
    """Outcome for one dependency processed by the updater."""
    dependency: Dependency
    old_version: str
    new_version: Optional[str]
    mode: Optional[ResolutionMode]
    changed: bool
