import pytest
from click.testing import CliRunner

from pathy_admin.cli.main import main
from pathy_admin.models.session import Role
from pathy_admin.session_store import SessionStore

from conftest import make_session


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setattr("pathy_admin.session_store.SESSION_FILE", tmp_path / "session.json")
    monkeypatch.setattr("pathy_admin.config.CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.delenv("PATHY_ADMIN_BASE_URL", raising=False)
    return tmp_path


def test_status_when_logged_out(home):
    result = CliRunner().invoke(main, ["auth", "status"])
    assert result.exit_code == 0
    assert "Not logged in" in result.output


def test_status_lists_views(home):
    SessionStore(home / "session.json").save(make_session(Role.SUPER_ADMIN))
    result = CliRunner().invoke(main, ["auth", "status"])
    assert result.exit_code == 0
    assert "super-admin" in result.output
    assert "payments" in result.output


def test_views_require_login(home):
    result = CliRunner().invoke(main, ["orders", "list"])
    assert result.exit_code == 1
    assert "Not logged in" in result.output


def test_logout_removes_session(home):
    SessionStore(home / "session.json").save(make_session())
    result = CliRunner().invoke(main, ["auth", "logout"])
    assert result.exit_code == 0
    assert not (home / "session.json").exists()
