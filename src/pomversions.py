"""pomversions - replace SNAPSHOT dependency versions with releases.

    Returns:
        int: Exit code
"""
import sys
import logging

from constants import ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import ConfigError, build_config
from registry.metadata import LocalRepositoryMetadataSource, MetadataRetrievalError, StaticMetadataSource
from rewriting.tokenizer import DocumentStructureError
from versioning.models import InvalidQualifierPatternError, InvalidVersionSpecificationError
from versioning.service import UseReleasesService

logger = logging.getLogger(__name__)


def build_source(config):
    """Pick the version source: a versions file when given, else the local repository."""
    if config.versions_file:
        try:
            return StaticMetadataSource.from_file(config.versions_file)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
    return LocalRepositoryMetadataSource(config.repository)


def report(outcome, dry_run=False):
    """Log a one-line summary per dependency considered."""
    results = outcome.result or []
    for result in results:
        if result.new_version is None:
            logger.info("No release found for %s", result.dependency)
        elif not result.changed:
            logger.warning("%s was not updated", result.dependency)
    updated = sum(1 for result in results if result.changed)
    if dry_run and outcome.changed:
        logger.info("Dry run: %d dependency version(s) would be updated in %s", updated, outcome.path)
    elif outcome.written:
        logger.info("Updated %d dependency version(s) in %s", updated, outcome.path)
    else:
        logger.info("No changes to %s", outcome.path)


def run(args):
    """Execute one rewrite pass and return an ExitCodes member."""
    try:
        config = build_config(args)
        source = build_source(config)
        service = UseReleasesService(source, config)
        outcome = service.run(args.POM_FILE, dry_run=args.DRY_RUN)
    except FileNotFoundError as exc:
        logger.error("File not found: %s, aborting", exc)
        return ExitCodes.FILE_ERROR
    except (ConfigError, InvalidQualifierPatternError, InvalidVersionSpecificationError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return ExitCodes.CONFIG_ERROR
    except MetadataRetrievalError as exc:
        logger.error("%s", exc)
        return ExitCodes.RETRIEVAL_ERROR
    except DocumentStructureError as exc:
        logger.error("Malformed POM %s: %s", args.POM_FILE, exc)
        return ExitCodes.STRUCTURE_ERROR
    except (OSError, UnicodeError) as exc:
        logger.error("IO error: %s, aborting", exc)
        return ExitCodes.FILE_ERROR

    if is_debug_enabled(logger):
        logger.debug(
            "Run finished",
            extra=extra_context(
                event="function_exit", component="cli", action="run",
                target=args.POM_FILE, changed=outcome.changed, written=outcome.written,
            ),
        )
    report(outcome, dry_run=args.DRY_RUN)
    return ExitCodes.SUCCESS


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    sys.exit(run(args).value)


if __name__ == "__main__":
    main()
