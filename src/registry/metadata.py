"""Sources of known versions for an artifact coordinate.

The core only depends on ``fetch_known_versions(coordinate) -> set``; the
implementations here read a local Maven repository layout or a static
versions file. Retrieval problems raise MetadataRetrievalError and are
never reported as "no versions available".
"""
from __future__ import annotations

import glob
import json
import logging
import os
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Mapping, Protocol, Set

import yaml

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from versioning.models import Coordinate

logger = logging.getLogger(__name__)


class MetadataRetrievalError(RuntimeError):
    """Raised when the known versions of an artifact cannot be read."""

    def __init__(self, coordinate: Coordinate, reason: str):
        self.coordinate = coordinate
        super().__init__(f"Unable to retrieve versions of {coordinate}: {reason}")


class MetadataSource(Protocol):  # pylint: disable=too-few-public-methods
    """Anything able to list the known versions of a coordinate."""

    def fetch_known_versions(self, coordinate: Coordinate) -> Set[str]:
        ...


def parse_metadata_versions(text: str) -> List[str]:
    """Versions listed in a maven-metadata.xml document, in source order."""
    root = ET.fromstring(text)
    versions = []
    versions_elem = root.find("versioning/versions")
    if versions_elem is None:
        return versions
    for item in versions_elem.findall("version"):
        if item.text and item.text.strip():
            versions.append(item.text.strip())
    return versions


class LocalRepositoryMetadataSource:
    """Reads ``<root>/<group path>/<artifact>`` in a Maven repository layout.

    Versions come from every ``maven-metadata*.xml`` file in the artifact
    directory plus the names of its version subdirectories.
    """

    def __init__(self, root: str = Constants.DEFAULT_REPOSITORY):
        self.root = os.path.expanduser(root)

    def artifact_dir(self, coordinate: Coordinate) -> str:
        group_path = coordinate.group_id.replace(".", os.sep)
        return os.path.join(self.root, group_path, coordinate.artifact_id)

    def fetch_known_versions(self, coordinate: Coordinate) -> Set[str]:
        directory = self.artifact_dir(coordinate)
        versions: Set[str] = set()
        if not os.path.isdir(directory):
            logger.debug("No local metadata for %s in %s", coordinate, directory)
            return versions

        with Timer() as timer:
            for metadata_path in sorted(glob.glob(os.path.join(directory, Constants.METADATA_GLOB))):
                try:
                    with open(metadata_path, "r", encoding="utf-8") as handle:
                        versions.update(parse_metadata_versions(handle.read()))
                except (OSError, ET.ParseError, UnicodeDecodeError) as exc:
                    raise MetadataRetrievalError(coordinate, f"{metadata_path}: {exc}") from exc

            for entry in os.listdir(directory):
                if os.path.isdir(os.path.join(directory, entry)) and entry[:1].isdigit():
                    versions.add(entry)

        if is_debug_enabled(logger):
            logger.debug(
                "Local metadata read",
                extra=extra_context(
                    event="function_exit", component="metadata", action="fetch_known_versions",
                    target=str(coordinate), count=len(versions), duration_ms=timer.duration_ms(),
                ),
            )
        return versions


class StaticMetadataSource:
    """Fixed ``coordinate -> versions`` mapping, e.g. loaded from a versions file."""

    def __init__(self, mapping: Mapping[Coordinate, Iterable[str]]):
        self._versions: Dict[Coordinate, Set[str]] = {c: set(v) for c, v in mapping.items()}

    @classmethod
    def from_file(cls, path: str) -> "StaticMetadataSource":
        """Load a YAML or JSON map of ``"group:artifact"`` to version lists."""
        try:
            with open(path, "r", encoding="utf-8") as handle:
                if path.lower().endswith(".json"):
                    data = json.load(handle)
                else:
                    # BaseLoader keeps "1.10" a string instead of the float 1.1
                    data = yaml.load(handle, Loader=yaml.BaseLoader)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValueError(f"Unable to read versions file {path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Versions file {path} must map 'groupId:artifactId' to a list of versions")
        mapping: Dict[Coordinate, List[str]] = {}
        for key, values in data.items():
            if not isinstance(values, list):
                raise ValueError(f"Versions of '{key}' in {path} must be a list")
            mapping[Coordinate.parse(str(key))] = [str(v) for v in values]
        return cls(mapping)

    def fetch_known_versions(self, coordinate: Coordinate) -> Set[str]:
        return set(self._versions.get(coordinate, ()))
