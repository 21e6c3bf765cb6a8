"""POM specific helpers on top of the generic patcher."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from constants import PomSections
from versioning.models import Coordinate, Dependency, PatchTarget

from .document import ModifiedDocument, Path
from .patcher import apply_patch_all
from .tokenizer import TokenKind

logger = logging.getLogger(__name__)

PROJECT = "project"

# Element paths holding <dependency> children, keyed to their POM section.
DEPENDENCY_CONTAINERS = {
    (PROJECT, "dependencies"): PomSections.DEPENDENCIES,
    (PROJECT, "dependencyManagement", "dependencies"): PomSections.DEPENDENCY_MANAGEMENT,
    (PROJECT, "profiles", "profile", "dependencies"): PomSections.DEPENDENCIES,
    (PROJECT, "profiles", "profile", "dependencyManagement", "dependencies"): PomSections.DEPENDENCY_MANAGEMENT,
}


def iter_dependencies(document: ModifiedDocument, sections: Optional[List[PomSections]] = None) -> Iterator[Dependency]:
    """Yield every dependency declaration in document order.

    Declarations without groupId or artifactId are skipped; a missing
    version (managed elsewhere) is reported as None.
    """
    for index, token, element_path in document.walk():
        if token.kind not in (TokenKind.START, TokenKind.EMPTY) or element_path[-1:] != ("dependency",):
            continue
        container: Path = element_path[:-1]
        section = DEPENDENCY_CONTAINERS.get(container)
        if section is None or (sections is not None and section not in sections):
            continue
        group_id = document.child_text(index, "groupId")
        artifact_id = document.child_text(index, "artifactId")
        if not group_id or not artifact_id:
            logger.debug("Skipping dependency without coordinates at /%s", "/".join(element_path))
            continue
        yield Dependency(
            coordinate=Coordinate(group_id, artifact_id),
            version=document.child_text(index, "version"),
            section=section.value,
            path=element_path,
        )


def project_coordinate(document: ModifiedDocument) -> Optional[Coordinate]:
    """Coordinate of the project itself; groupId may be inherited from the parent."""
    for index, token, element_path in document.walk():
        if token.kind is TokenKind.START and element_path == (PROJECT,):
            artifact_id = document.child_text(index, "artifactId")
            group_id = document.child_text(index, "groupId")
            if not group_id:
                for child_index, name in document.children(index):
                    if name == "parent":
                        group_id = document.child_text(child_index, "groupId")
                        break
            if group_id and artifact_id:
                return Coordinate(group_id, artifact_id)
            return None
    return None


def set_dependency_version(document: ModifiedDocument, dependency: Dependency, old_version: str, new_version: str) -> bool:
    """Rewrite ``dependency``'s version wherever it is declared with ``old_version``.

    Every occurrence at the dependency's path with the same coordinate is
    considered; returns True when at least one was changed.
    """
    target = PatchTarget.for_dependency(dependency, old_version)
    return apply_patch_all(document, target, new_version) > 0
