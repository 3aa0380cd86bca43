# Copyright 2025 The jazz-scm-client Authors
# License AGPL-3.0 or later (http://www.gnu.org/licenses/agpl)

import re
from os import PathLike
from typing import Dict, Iterable, List, Optional, Union

from ..exceptions import ChangelogParseError
from ..models import Action, ChangeSet

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def list_args(job_workspace: Union[str, PathLike], revisions: Iterable[str],
              auth_args: Optional[List[str]] = None) -> List[str]:
    return ["list", "changesets", *(auth_args or []), "-d", str(job_workspace), *revisions]


class ListChangesetsParser:
    """Reads ``scm list changesets`` output into items and work items per revision.

    The output is indentation based: a changeset header at two spaces, then
    its files and work items at six::

          (1001) ---$ Alice "Fix bug" 02-Jan-2024 03:04 AM
              --a-- \\src\\a.java
              (42) "Ticket"
    """
    RE_CHANGESET = re.compile(r"^ {2}\((\d+)\)\s*---\$\s*(\D*)\s+(.*)$")
    RE_FILE = re.compile(r"^ {6}(.{5})\s(\S*)\s+(.*)$")
    RE_WORK_ITEM = re.compile(r"^ {6}\((\d+)\)\s+(.*)$")
    # Some scm versions print fewer flag columns, or a single path.
    RE_COMPACT_FILE = re.compile(r"^ {6}([-a-z]{2,5})\s+(?:\S+\s+)?(\S.*)$")

    def parse(self, lines: Iterable[str]) -> Dict[str, ChangeSet]:
        changesets = {}
        current = None
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            match = self.RE_CHANGESET.match(line)
            if match:
                if current is not None:
                    changesets[current.rev] = current
                current = ChangeSet(rev=match.group(1))
                continue

            item = self._parse_file_line(line)
            if item:
                self._require(current, line_number, line, "file entry outside of a changeset")
                current.add_item(*item)
                continue

            match = self.RE_WORK_ITEM.match(line)
            if match:
                self._require(current, line_number, line, "work item outside of a changeset")
                current.add_work_item(match.group(1))

        if current is not None:
            changesets[current.rev] = current
        return changesets

    def _parse_file_line(self, line: str):
        match = self.RE_FILE.match(line)
        if match:
            flags, path = match.group(1), match.group(3)
        else:
            match = self.RE_COMPACT_FILE.match(line)
            if not match:
                return None
            flags, path = match.group(1), match.group(2)
        return normalize_path(path), action_for_flags(flags)

    @staticmethod
    def _require(current: Optional[ChangeSet], line_number: int, line: str, reason: str) -> None:
        if current is None:
            raise ChangelogParseError(line_number, line, reason)


def action_for_flags(flags: str) -> Action:
    if len(flags) == 5:
        flag = flags[2]
    else:
        flag = flags.strip("-")[:1]
    if flag == "a":
        return "added"
    if flag == "d":
        return "deleted"
    return "edit"


def normalize_path(path: str) -> str:
    return path.replace("\\", "/").strip()
