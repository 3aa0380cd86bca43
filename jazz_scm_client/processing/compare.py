# Copyright 2025 The jazz-scm-client Authors
# License AGPL-3.0 or later (http://www.gnu.org/licenses/agpl)

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models import ChangeSet, DATE_FORMAT

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Formats handed to ``scm compare`` so each changeset fits on one line:
# (<rev>)|<name>|<email>|<comment>|<date>|
CONTRIBUTOR_FORMAT = "|{name}|{email}|"
SCM_DATE_FORMAT = "yyyy-MM-dd-HH:mm:ss"


def compare_args(workspace_name: str, stream_name: str, repository_location: str,
                 auth_args: Optional[List[str]] = None) -> List[str]:
    return [
        "compare",
        "ws", workspace_name,
        "stream", stream_name,
        *(auth_args or []),
        "-r", repository_location,
        "-I", "s",
        "-C", CONTRIBUTOR_FORMAT,
        "-D", f"|{SCM_DATE_FORMAT}|",
    ]


class CompareParser:
    """Reads the short output of ``scm compare`` into changeset headers."""

    def parse(self, lines: Iterable[str]) -> Dict[str, ChangeSet]:
        changesets = {}
        for line in lines:
            if not line.strip():
                continue
            changeset = self.parse_line(line)
            if changeset is not None:
                changesets[changeset.rev] = changeset
        return changesets

    def parse_line(self, line: str) -> Optional[ChangeSet]:
        fields = line.split("|")
        if not fields[-1].strip():
            fields.pop()
        parts = [field.strip() for field in fields]
        if len(parts) < 5:
            logger.warning(f"Skipping unexpected compare output: {line!r}")
            return None
        # The revision is wrapped in one bracket on each side.
        rev = parts[0][1:-1]
        raw_date = parts[-1]
        return ChangeSet(
            rev=rev,
            user=parts[1],
            email=parts[2],
            msg="|".join(fields[3:-1]).strip(),
            date=self._parse_date(raw_date, rev),
        )

    def _parse_date(self, value: str, rev: str) -> Optional[datetime]:
        try:
            return datetime.strptime(value, DATE_FORMAT)
        except ValueError:
            logger.warning(f"Error parsing date '{value}' for revision ({rev})")
            return None
