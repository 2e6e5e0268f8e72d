import os

import pytest

from openlibrary_search.config import ClientConfig, load_dotenv


def test_from_env_defaults(monkeypatch) -> None:
    for name in ("OPENLIBRARY_BASE_URL", "OPENLIBRARY_TIMEOUT", "OPENLIBRARY_USER_AGENT", "OPENLIBRARY_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)
    cfg = ClientConfig.from_env()
    assert cfg.base_url == "https://openlibrary.org"
    assert cfg.timeout_s == 30.0
    assert cfg.max_workers == 0
    cfg.validate()


def test_from_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("OPENLIBRARY_BASE_URL", "http://localhost:8080")
    monkeypatch.setenv("OPENLIBRARY_TIMEOUT", "2.5")
    monkeypatch.setenv("OPENLIBRARY_MAX_WORKERS", "2")
    cfg = ClientConfig.from_env()
    assert cfg.base_url == "http://localhost:8080"
    assert cfg.timeout_s == 2.5
    assert cfg.max_workers == 2


def test_bad_number_exits(monkeypatch) -> None:
    monkeypatch.setenv("OPENLIBRARY_TIMEOUT", "soon")
    with pytest.raises(SystemExit):
        ClientConfig.from_env()


@pytest.mark.parametrize(
    "cfg",
    [
        ClientConfig(base_url="openlibrary.org"),
        ClientConfig(timeout_s=0),
        ClientConfig(max_workers=-1),
    ],
)
def test_validate_rejects(cfg) -> None:
    with pytest.raises(SystemExit):
        cfg.validate()


def test_load_dotenv_does_not_override(monkeypatch, tmp_path) -> None:
    env = tmp_path / ".env"
    env.write_text(
        "# comment\n"
        "export OPENLIBRARY_USER_AGENT='my-agent/1.0'  # inline\n"
        "OPENLIBRARY_TIMEOUT=5\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ENV_PATH", str(env))
    monkeypatch.setenv("OPENLIBRARY_TIMEOUT", "9")
    monkeypatch.setenv("OPENLIBRARY_USER_AGENT", "placeholder")
    monkeypatch.delenv("OPENLIBRARY_USER_AGENT")

    assert load_dotenv(".env") == str(env.resolve())
    cfg = ClientConfig.from_env()
    assert cfg.user_agent == "my-agent/1.0"
    assert cfg.timeout_s == 9.0


def test_read_env_file_only_loads_client_keys(monkeypatch, tmp_path) -> None:
    env = tmp_path / "client.env"
    env.write_text(
        "OPENLIBRARY_BASE_URL=http://localhost:8080 # local mirror\n"
        "UNRELATED_SECRET=hunter2\n"
        "OPENLIBRARY_MAX_WORKERS='unterminated\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ENV_PATH", str(env))
    monkeypatch.setenv("OPENLIBRARY_BASE_URL", "placeholder")
    monkeypatch.delenv("OPENLIBRARY_BASE_URL")
    monkeypatch.setenv("UNRELATED_SECRET", "placeholder")
    monkeypatch.delenv("UNRELATED_SECRET")
    monkeypatch.setenv("OPENLIBRARY_MAX_WORKERS", "placeholder")
    monkeypatch.delenv("OPENLIBRARY_MAX_WORKERS")

    load_dotenv(".env")

    assert os.environ["OPENLIBRARY_BASE_URL"] == "http://localhost:8080"
    assert "UNRELATED_SECRET" not in os.environ
    assert "OPENLIBRARY_MAX_WORKERS" not in os.environ
