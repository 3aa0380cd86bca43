import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from jazz_scm_client.exceptions import ScmError
from jazz_scm_client.models import ScmSettings
from jazz_scm_client.processing.client import JazzClient

from config import (
    JAZZ_EXECUTABLE,
    SCM_USERNAME,
    SCM_PASSWORD,
    SCM_TIMEOUT,
    SCM_INCOMING_TOKEN,
    SCM_REPOSITORY_LOCATION,
    SCM_STREAM_NAME,
    SCM_WORKSPACE_NAME,
    JOB_WORKSPACE,
    CHANGELOG_PATH,
    LOG_LEVEL,
)

import logging

logging.basicConfig(level=LOG_LEVEL, force=True)
logger = logging.getLogger(__name__)


def load_settings() -> ScmSettings:
    return ScmSettings(
        jazz_executable=JAZZ_EXECUTABLE,
        username=SCM_USERNAME or None,
        password=SCM_PASSWORD or None,
        repository_location=SCM_REPOSITORY_LOCATION,
        stream_name=SCM_STREAM_NAME,
        workspace_name=SCM_WORKSPACE_NAME,
        job_workspace=Path(JOB_WORKSPACE),
        timeout=SCM_TIMEOUT,
        incoming_token=SCM_INCOMING_TOKEN,
    )


def main(argv=None) -> int:
    """Entry point for command-line tasks (changelog, load, accept, status, loaded)."""
    parser = argparse.ArgumentParser(description="RTC scm client for CI jobs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    changelog_parser = subparsers.add_parser("changelog", help="Write the incoming changesets as an XML changelog.")
    changelog_parser.add_argument(
        "--output",
        type=str,
        default=CHANGELOG_PATH,
        help="Changelog file to write (default: CHANGELOG_PATH).",
    )
    subparsers.add_parser("load", help="Load the repository workspace into the job workspace.")
    subparsers.add_parser("accept", help="Accept incoming changes from the stream.")
    subparsers.add_parser("status", help="Exit 0 when the stream has incoming changes, 1 otherwise.")
    subparsers.add_parser("loaded", help="Exit 0 when the job workspace is already loaded, 1 otherwise.")

    args = parser.parse_args(argv)

    try:
        client = JazzClient(load_settings())
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        if args.command == "changelog":
            changesets = client.get_changes(Path(args.output))
            logger.info(f"{len(changesets)} changesets written to {args.output}")
            return 0
        elif args.command == "load":
            return 0 if client.load() else 1
        elif args.command == "accept":
            return 0 if client.accept() else 1
        elif args.command == "status":
            if client.has_changes():
                logger.info("Incoming changes found.")
                return 0
            logger.info("No incoming changes.")
            return 1
        elif args.command == "loaded":
            return 0 if client.is_loaded() else 1
    except ScmError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
