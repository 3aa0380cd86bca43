# Copyright 2025 The jazz-scm-client Authors
# License AGPL-3.0 or later (http://www.gnu.org/licenses/agpl)

import re
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional
from xml.sax.saxutils import XMLGenerator

from ..models import ChangeSet, DATE_FORMAT

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

INDENT = "  "
# Anything outside the XML 1.0 Char production.
RE_INVALID_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    return RE_INVALID_XML_CHARS.sub("", text)


def merge_changesets(compared: Mapping[str, ChangeSet], listed: Mapping[str, ChangeSet]) -> Dict[str, ChangeSet]:
    """Copy files and work items from the list result onto the compare result.

    Revisions only known to ``scm list`` are dropped.
    """
    for rev, changeset in compared.items():
        details = listed.get(rev)
        if details is None:
            logger.warning(f"No file details found for revision ({rev})")
            continue
        changeset.copy_items_from(details)
    return dict(compared)


class ChangelogWriter:
    """Streams a changelog document, one changeset at a time."""

    def __init__(self, stream):
        self._xml = XMLGenerator(stream, encoding="UTF-8")
        self._depth = 0

    def __enter__(self):
        self._xml.startDocument()
        self._start("changelog")
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self._end("changelog")
            self._xml.endDocument()
        return False

    def _indent(self):
        self._xml.ignorableWhitespace(INDENT * self._depth)

    @staticmethod
    def _attrs(attrs: Optional[Dict[str, str]]) -> Dict[str, str]:
        return {key: xml_safe(value) for key, value in (attrs or {}).items()}

    def _start(self, name: str, attrs: Optional[Dict[str, str]] = None):
        self._indent()
        self._xml.startElement(name, self._attrs(attrs))
        self._xml.ignorableWhitespace("\n")
        self._depth += 1

    def _end(self, name: str):
        self._depth -= 1
        self._indent()
        self._xml.endElement(name)
        self._xml.ignorableWhitespace("\n")

    def _element(self, name: str, text: str, attrs: Optional[Dict[str, str]] = None):
        self._indent()
        self._xml.startElement(name, self._attrs(attrs))
        self._xml.characters(xml_safe(text))
        self._xml.endElement(name)
        self._xml.ignorableWhitespace("\n")

    def write(self, changeset: ChangeSet) -> None:
        self._start("changeset", {"rev": changeset.rev})
        self._element("date", changeset.date_str)
        self._element("user", changeset.user)
        self._element("email", changeset.email)
        self._element("comment", changeset.msg)
        if changeset.items:
            self._start("files")
            for item in changeset.items:
                self._element("file", item.path, {"action": item.action})
            self._end("files")
        if changeset.work_items:
            self._start("workitems")
            for work_item in changeset.work_items:
                self._element("workitem", work_item)
            self._end("workitems")
        self._end("changeset")


def write_changelog(changesets: Iterable[ChangeSet], changelog_path: Path) -> int:
    count = 0
    with open(changelog_path, "w", encoding="utf-8", newline="\n") as f:
        with ChangelogWriter(f) as writer:
            for changeset in changesets:
                writer.write(changeset)
                count += 1
    logger.info(f"Wrote {count} changesets to {changelog_path}")
    return count


def read_changelog(changelog_path: Path) -> List[ChangeSet]:
    """Load a changelog written by :func:`write_changelog`."""
    root = ET.parse(changelog_path).getroot()
    changesets = []
    for node in root.iter("changeset"):
        changeset = ChangeSet(
            rev=node.get("rev", ""),
            user=node.findtext("user", ""),
            email=node.findtext("email", ""),
            msg=node.findtext("comment", ""),
            date=_parse_date(node.findtext("date", "")),
        )
        for file_node in node.iterfind("files/file"):
            changeset.add_item(file_node.text or "", file_node.get("action", "edit"))
        for work_item in node.iterfind("workitems/workitem"):
            changeset.add_work_item(work_item.text or "")
        changesets.append(changeset)
    return changesets


def _parse_date(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        logger.warning(f"Ignoring malformed changelog date '{value}'")
        return None
