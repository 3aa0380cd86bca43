from datetime import datetime
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DATE_FORMAT = "%Y-%m-%d-%H:%M:%S"

Action = Literal["added", "deleted", "edit"]


class Item(BaseModel):
    """A file touched by a changeset."""
    path: str
    action: Action = "edit"


class ChangeSet(BaseModel):
    """A single RTC changeset as it appears in the changelog.

    Header fields (user, email, msg, date) come from ``scm compare``; items and
    work items come from ``scm list changesets`` and are joined in by revision.
    """
    rev: str
    user: str = ""
    email: str = ""
    msg: str = ""
    date: Optional[datetime] = None
    items: List[Item] = Field(default_factory=list)
    work_items: List[str] = Field(default_factory=list)

    @property
    def date_str(self) -> str:
        if self.date is None:
            return ""
        return self.date.strftime(DATE_FORMAT)

    def add_item(self, path: str, action: Action) -> None:
        self.items.append(Item(path=path, action=action))

    def add_work_item(self, work_item: str) -> None:
        self.work_items.append(work_item)

    def copy_items_from(self, other: "ChangeSet") -> None:
        self.items = [item.model_copy() for item in other.items]
        self.work_items = list(other.work_items)


class ScmSettings(BaseModel):
    """Everything needed to drive ``scm`` for one job."""
    jazz_executable: str = "scm"
    username: Optional[str] = None
    password: Optional[str] = None
    repository_location: str = ""
    stream_name: str = ""
    workspace_name: str = ""
    job_workspace: Path = Path(".")
    timeout: float = Field(default=300.0, gt=0)
    incoming_token: str = "Incoming:"
