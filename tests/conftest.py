import textwrap
from pathlib import Path

import pytest

from jazz_scm_client.models import ScmSettings

COMPARE_OUTPUT = "(1001)|Alice|alice@x.test|Fix bug|2024-01-02-03:04:05|\n"

LIST_OUTPUT = (
    "  (1001) ---$ Alice Fix bug\n"
    "      a-- src/a.java  src/a.java\n"
    "      (42) Ticket-42\n"
)


@pytest.fixture
def fake_scm(tmp_path):
    """Write an ``scm`` stand-in that replays canned output per subcommand.

    Every invocation's arguments are appended to ``calls.log``.
    """
    def make(compare="", listing="", status="", exit_code=0, body=""):
        (tmp_path / "compare.out").write_text(compare)
        (tmp_path / "list.out").write_text(listing)
        (tmp_path / "status.out").write_text(status)
        script = tmp_path / "scm"
        script.write_text(textwrap.dedent(f"""\
            #!/bin/sh
            echo "$*" >> "{tmp_path}/calls.log"
            {body}
            case "$1" in
              compare) cat "{tmp_path}/compare.out" ;;
              list) cat "{tmp_path}/list.out" ;;
              status) cat "{tmp_path}/status.out" ;;
            esac
            exit {exit_code}
            """))
        script.chmod(0o755)
        return script
    return make


@pytest.fixture
def calls(tmp_path):
    def read():
        log = tmp_path / "calls.log"
        if not log.exists():
            return []
        return log.read_text().splitlines()
    return read


@pytest.fixture
def settings_for(tmp_path):
    def make(executable: Path, **overrides) -> ScmSettings:
        values = dict(
            jazz_executable=str(executable),
            repository_location="https://rtc.example.com/ccm",
            stream_name="Main Stream",
            workspace_name="CI Workspace",
            job_workspace=tmp_path / "job",
        )
        values.update(overrides)
        return ScmSettings(**values)
    return make
