"""Argument parsing functionality for pomversions."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Options left unset default to None so that values from a configuration
    file are only overridden by flags the user actually passed.
    """
    parser = argparse.ArgumentParser(
        prog="pomversions",
        description=(
            "pomversions - replace SNAPSHOT dependency versions in a pom.xml "
            "with their releases, leaving the rest of the file untouched"
        ),
        add_help=True,
    )

    parser.add_argument("-f", "--file",
                        dest="POM_FILE",
                        help="Path to the POM to rewrite (default: pom.xml)",
                        action="store", type=str,
                        default=Constants.POM_XML_FILE)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    parser.add_argument("--comparison-method",
                        dest="comparison_method",
                        help="Version ordering: maven (default), numeric or mercury",
                        action="store", type=str.lower,
                        choices=Constants.COMPARISON_METHODS)
    parser.add_argument("--accept-qualified-releases",
                        dest="accept_qualified_releases",
                        help="When no exact release exists, accept qualified releases such as 2.0-beta",
                        action="store_const", const=True)
    parser.add_argument("--qualifier-includes",
                        dest="qualifier_includes",
                        help="Comma separated qualifier patterns to accept",
                        action="store", type=str)
    parser.add_argument("--qualifier-excludes",
                        dest="qualifier_excludes",
                        help="Comma separated qualifier patterns to discard",
                        action="store", type=str)
    parser.add_argument("--allow-snapshots",
                        dest="allow_snapshots",
                        help="Allow snapshot versions as qualified-release candidates",
                        action="store_const", const=True)
    parser.add_argument("--version-range",
                        dest="version_range",
                        help="Only accept releases inside this range, e.g. '[1.0,2.0)'",
                        action="store", type=str)

    parser.add_argument("--includes",
                        dest="includes",
                        help="Comma separated groupId:artifactId patterns to process (wildcards allowed)",
                        action="store", type=str)
    parser.add_argument("--excludes",
                        dest="excludes",
                        help="Comma separated groupId:artifactId patterns to skip (wildcards allowed)",
                        action="store", type=str)
    parser.add_argument("--no-dependencies",
                        dest="process_dependencies",
                        help="Do not process the dependencies section",
                        action="store_const", const=False)
    parser.add_argument("--no-dependency-management",
                        dest="process_dependency_management",
                        help="Do not process the dependencyManagement section",
                        action="store_const", const=False)
    parser.add_argument("--include-reactor",
                        dest="exclude_reactor",
                        help="Also process dependencies on the project itself",
                        action="store_const", const=False)

    parser.add_argument("--repository",
                        dest="repository",
                        help=f"Local Maven repository to read versions from (default: {Constants.DEFAULT_REPOSITORY})",
                        action="store", type=str)
    parser.add_argument("--versions-file",
                        dest="versions_file",
                        help="YAML or JSON file mapping groupId:artifactId to known versions",
                        action="store", type=str)
    parser.add_argument("--backup",
                        dest="generate_backup_poms",
                        help=f"Keep a copy of the original POM with the {Constants.BACKUP_SUFFIX} suffix",
                        action="store_const", const=True)
    parser.add_argument("-n", "--dry-run",
                        dest="DRY_RUN",
                        help="Report changes without writing the POM",
                        action="store_true")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
