import manage
from jazz_scm_client.models import ScmSettings

from .conftest import COMPARE_OUTPUT, LIST_OUTPUT


def use_settings(monkeypatch, settings: ScmSettings):
    monkeypatch.setattr(manage, "load_settings", lambda: settings)


def test_changelog_command(fake_scm, settings_for, monkeypatch, tmp_path):
    use_settings(monkeypatch, settings_for(fake_scm(compare=COMPARE_OUTPUT, listing=LIST_OUTPUT)))
    output = tmp_path / "out.xml"

    assert manage.main(["changelog", "--output", str(output)]) == 0
    assert '<changeset rev="1001">' in output.read_text(encoding="utf-8")


def test_scm_failure_exits_non_zero(fake_scm, settings_for, monkeypatch, tmp_path):
    use_settings(monkeypatch, settings_for(fake_scm(exit_code=1)))

    assert manage.main(["changelog", "--output", str(tmp_path / "out.xml")]) == 1
    assert manage.main(["load"]) == 1


def test_status_command(fake_scm, settings_for, monkeypatch):
    use_settings(monkeypatch, settings_for(fake_scm(status="    Incoming:\n")))
    assert manage.main(["status"]) == 0

    use_settings(monkeypatch, settings_for(fake_scm(status="nothing\n")))
    assert manage.main(["status"]) == 1


def test_load_settings_reads_config(monkeypatch):
    monkeypatch.setattr(manage, "JAZZ_EXECUTABLE", "/opt/scm")
    monkeypatch.setattr(manage, "SCM_USERNAME", "")
    monkeypatch.setattr(manage, "SCM_TIMEOUT", 12.5)

    settings = manage.load_settings()

    assert settings.jazz_executable == "/opt/scm"
    assert settings.username is None
    assert settings.timeout == 12.5


def test_missing_executable_exits_non_zero(settings_for, monkeypatch, tmp_path):
    use_settings(monkeypatch, settings_for(tmp_path / "no-such-scm"))

    assert manage.main(["changelog", "--output", str(tmp_path / "out.xml")]) == 1
    assert manage.main(["status"]) == 1
    assert not (tmp_path / "out.xml").exists()
