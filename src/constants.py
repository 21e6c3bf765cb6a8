"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONFIG_ERROR = 2
    RETRIEVAL_ERROR = 3
    STRUCTURE_ERROR = 4


class ComparisonMethods(Enum):
    """Version comparison strategies selectable by name.

    Args:
        Enum (string): Strategy names accepted on the command line.
    """

    MAVEN = "maven"
    NUMERIC = "numeric"
    MERCURY = "mercury"


class PomSections(Enum):
    """Sections of a POM that declare dependency versions."""

    DEPENDENCIES = "dependencies"
    DEPENDENCY_MANAGEMENT = "dependencyManagement"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    COMPARISON_METHODS = [method.value for method in ComparisonMethods]
    POM_XML_FILE = "pom.xml"
    BACKUP_SUFFIX = ".versionsBackup"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "POMVERSIONS_LOG_LEVEL"
    DEFAULT_REPOSITORY = "~/.m2/repository"
    DEFAULT_ENCODING = "utf-8"

    # Group 1 is the version being approached; group 2 the snapshot marker.
    SNAPSHOT_PATTERN = r"^(.+)-((SNAPSHOT)|(\d{8}\.\d{6}-\d+))$"
    TIMESTAMP_SNAPSHOT_PATTERN = r"^\d{8}\.\d{6}-\d+$"
    METADATA_GLOB = "maven-metadata*.xml"
