# Copyright 2025 The jazz-scm-client Authors
# License AGPL-3.0 or later (http://www.gnu.org/licenses/agpl)

import threading
from contextlib import closing
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..models import ChangeSet, ScmSettings
from .changelog import merge_changesets, write_changelog
from .compare import CompareParser, compare_args
from .listing import ListChangesetsParser, list_args
from .runner import ScmRunner

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class JazzClient:
    """Runs the RTC ``scm`` command line interface for one job workspace."""

    def __init__(self, settings: ScmSettings, runner: Optional[ScmRunner] = None,
                 listener: Optional[logging.Logger] = None, cancel_event: Optional[threading.Event] = None):
        self.settings = settings
        self.runner = runner or ScmRunner(
            settings.jazz_executable,
            username=settings.username,
            password=settings.password,
            timeout=settings.timeout,
            listener=listener,
            cancel_event=cancel_event,
        )

    @property
    def job_workspace(self) -> str:
        return str(self.settings.job_workspace)

    def has_changes(self) -> bool:
        command = self.runner.command(
            "status", *self.runner.auth_args(), "-C", "-w", "-n", "-d", self.job_workspace
        )
        output = self.runner.popen(command).decode(self.runner.encoding, errors="replace")
        token = self.settings.incoming_token
        return any(line.strip().startswith(token) for line in output.splitlines())

    def load(self) -> bool:
        command = self.runner.command(
            "load", self.settings.workspace_name, *self.runner.auth_args(),
            "-r", self.settings.repository_location,
            "-d", self.job_workspace,
            "-f",
        )
        return self.runner.call(command) == 0

    def is_loaded(self) -> bool:
        command = self.runner.command(
            "history", *self.runner.auth_args(), "-m", "1", "-d", self.job_workspace
        )
        return self.runner.call(command) == 0

    def accept(self) -> bool:
        command = self.runner.command(
            "accept", *self.runner.auth_args(),
            "-d", self.job_workspace,
            "--flow-components", "-o", "-v",
        )
        return self.runner.call(command) == 0

    def compare(self) -> Dict[str, ChangeSet]:
        command = self.runner.command(*compare_args(
            self.settings.workspace_name,
            self.settings.stream_name,
            self.settings.repository_location,
            self.runner.auth_args(),
        ))
        with closing(self.runner.stream(command)) as lines:
            return CompareParser().parse(lines)

    def list_changesets(self, revisions: Iterable[str]) -> Dict[str, ChangeSet]:
        command = self.runner.command(*list_args(self.job_workspace, revisions, self.runner.auth_args()))
        with closing(self.runner.stream(command)) as lines:
            return ListChangesetsParser().parse(lines)

    def get_changes(self, changelog_path: Path) -> List[ChangeSet]:
        """Write the incoming changesets of the stream to ``changelog_path``.

        ``scm compare`` supplies the author, comment and date of each incoming
        changeset; ``scm list changesets`` is then asked for the files and work
        items of exactly those revisions.
        """
        compared = self.compare()
        if not compared:
            logger.info("No incoming changesets.")
            write_changelog([], changelog_path)
            return []
        logger.info(f"Found {len(compared)} incoming changesets.")
        listed = self.list_changesets(compared.keys())
        changesets = list(merge_changesets(compared, listed).values())
        write_changelog(changesets, changelog_path)
        return changesets
