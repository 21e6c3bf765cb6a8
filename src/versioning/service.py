"""Use-releases driver: replace snapshot dependency versions with releases.

For every snapshot dependency the known versions are fetched, a release is
selected and handed to the POM patcher. Selection is pure; the only side
effect is the sequence of patches against the one document buffer.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, PomSections
from ordering import VersionComparator, get_version_comparator
from rewriting.document import ModifiedDocument
from rewriting.pom import iter_dependencies, project_coordinate, set_dependency_version
from rewriting.rewrite import RewriteOutcome, rewrite_file

from .models import Coordinate, Dependency, QualifierFilter, ResolutionMode, UpdateResult, VersionRange
from .parser import match_snapshot
from .selector import select

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdaterConfig:  # pylint: disable=too-many-instance-attributes
    """Per-run settings of the updater.

    The comparator, qualifier filter and allowed range are built on
    construction so that invalid patterns and range expressions fail before
    any dependency is looked at.
    """
    comparison_method: str = "maven"
    accept_qualified_releases: bool = False
    qualifier_includes: Tuple[str, ...] = ()
    qualifier_excludes: Tuple[str, ...] = ()
    allow_snapshots: bool = False
    includes: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()
    process_dependencies: bool = True
    process_dependency_management: bool = True
    exclude_reactor: bool = True
    generate_backup_poms: bool = False
    repository: str = Constants.DEFAULT_REPOSITORY
    versions_file: Optional[str] = None
    version_range: Optional[str] = None
    comparator: VersionComparator = field(init=False, repr=False, compare=False)
    qualifier_filter: QualifierFilter = field(init=False, repr=False, compare=False)
    allowed_range: Optional[VersionRange] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ("qualifier_includes", "qualifier_excludes", "includes", "excludes"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(self, "comparator", get_version_comparator(self.comparison_method))
        object.__setattr__(
            self, "qualifier_filter", QualifierFilter(self.qualifier_includes, self.qualifier_excludes)
        )
        allowed_range = None
        if self.version_range:
            allowed_range = VersionRange.create(self.version_range, self.comparator)
        object.__setattr__(self, "allowed_range", allowed_range)

    @property
    def sections(self) -> List[PomSections]:
        """Sections to process; dependencyManagement goes first."""
        sections = []
        if self.process_dependency_management:
            sections.append(PomSections.DEPENDENCY_MANAGEMENT)
        if self.process_dependencies:
            sections.append(PomSections.DEPENDENCIES)
        return sections


def _coordinate_pattern(pattern: str) -> str:
    return pattern if ":" in pattern else f"{pattern}:*"


def is_included(coordinate: Coordinate, includes: Tuple[str, ...], excludes: Tuple[str, ...]) -> bool:
    """Match ``groupId:artifactId`` against glob patterns; excludes win.

    A pattern without a colon matches a whole group.
    """
    text = str(coordinate)
    if any(fnmatch.fnmatchcase(text, _coordinate_pattern(p)) for p in excludes):
        return False
    if not includes:
        return True
    return any(fnmatch.fnmatchcase(text, _coordinate_pattern(p)) for p in includes)


class UseReleasesService:
    """Replaces ``-SNAPSHOT`` versions with the matching release when one exists."""

    def __init__(self, source, config: Optional[UpdaterConfig] = None):
        self.source = source
        self.config = config or UpdaterConfig()

    def update(self, document: ModifiedDocument) -> List[UpdateResult]:
        """Patch every eligible dependency of ``document`` in place."""
        reactor = project_coordinate(document) if self.config.exclude_reactor else None
        results: List[UpdateResult] = []
        seen: Set[Tuple[Tuple[str, ...], Coordinate, Optional[str]]] = set()
        for section in self.config.sections:
            for dependency in list(iter_dependencies(document, [section])):
                marker = (dependency.path, dependency.coordinate, dependency.version)
                if marker in seen:
                    continue
                seen.add(marker)
                result = self._use_release(document, dependency, reactor)
                if result is not None:
                    results.append(result)
        return results

    def run(self, pom_path: str, dry_run: bool = False) -> RewriteOutcome:
        """Rewrite ``pom_path`` in one buffered pass."""
        logger.info("Processing %s", pom_path)
        return rewrite_file(pom_path, self.update, backup=self.config.generate_backup_poms, dry_run=dry_run)

    def _use_release(
        self, document: ModifiedDocument, dependency: Dependency, reactor: Optional[Coordinate]
    ) -> Optional[UpdateResult]:
        version = dependency.version
        if not version or "${" in version:
            return None
        snapshot = match_snapshot(version)
        if snapshot is None:
            return None
        if reactor is not None and dependency.coordinate == reactor:
            logger.info("Ignoring reactor dependency: %s", dependency)
            return None
        if not is_included(dependency.coordinate, self.config.includes, self.config.excludes):
            return None

        approached = snapshot[0]
        logger.debug("Looking for a release of %s", dependency)
        candidates = self.source.fetch_known_versions(dependency.coordinate)
        comparator = self.config.comparator
        new_version = select(
            candidates,
            comparator,
            exact_target=approached,
            version_range=self.config.allowed_range,
            qualifier_filter=self.config.qualifier_filter,
            qualified_release_search=self.config.accept_qualified_releases,
            allow_snapshots=self.config.allow_snapshots,
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Release selection",
                extra=extra_context(
                    event="decision", component="use_releases", action="select",
                    target=str(dependency.coordinate), approached=approached,
                    candidates=len(candidates), selected=new_version,
                ),
            )
        if new_version is None:
            return UpdateResult(dependency, version, None, None, False)

        mode = ResolutionMode.EXACT if comparator.equals(new_version, approached) else ResolutionMode.QUALIFIED
        changed = set_dependency_version(document, dependency, version, new_version)
        if changed:
            logger.info("Updated %s to version %s", dependency, new_version)
        else:
            logger.warning("Version of %s no longer reads %s; left unchanged", dependency.coordinate, version)
        return UpdateResult(dependency, version, new_version, mode, changed)
