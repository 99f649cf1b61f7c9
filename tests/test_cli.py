import pytest

from prod_csv_api import cli
from prod_csv_api.config import Settings
from prod_csv_api.login import LoginStatus, ThrottleState


@pytest.fixture
def settings(monkeypatch):
    settings = Settings(app_user="operator", app_pass_hash="$2b$04$hash", port=3100)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    return settings


@pytest.fixture
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


def login_returns(monkeypatch, status):
    monkeypatch.setattr(cli, "run_login", lambda *args, **kwargs: ThrottleState(status=status))


def test_missing_credentials_exit_before_login(monkeypatch, served):
    monkeypatch.setattr(cli, "get_settings", lambda: Settings())
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "run_login", lambda *args, **kwargs: pytest.fail("login prompted"))

    assert cli.main(["serve"]) == 1
    assert served == []


def test_locked_login_never_starts_server(monkeypatch, settings, served):
    login_returns(monkeypatch, LoginStatus.LOCKED)

    assert cli.main(["serve"]) == 1
    assert served == []


def test_granted_login_starts_server(monkeypatch, settings, served):
    login_returns(monkeypatch, LoginStatus.GRANTED)

    assert cli.main([]) == 0
    (args, kwargs), = served
    assert args == ("prod_csv_api.main:app",)
    assert kwargs["port"] == 3100
    assert kwargs["host"] == "0.0.0.0"


def test_interrupted_login(monkeypatch, settings, served):
    def interrupt(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "run_login", interrupt)

    assert cli.main(["serve"]) == 130
    assert served == []


def test_hash_password_prints_hash(monkeypatch, capsys):
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli.getpass, "getpass", lambda prompt="": "s3cret")
    monkeypatch.setattr(cli, "hash_password", lambda password: f"hashed:{password}")

    assert cli.main(["hash-password"]) == 0
    assert capsys.readouterr().out.strip() == "hashed:s3cret"
