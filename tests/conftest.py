"""Shared test fixtures for gitjsondb tests."""

from collections.abc import Callable
from pathlib import Path

import paramiko
import pytest
from dulwich.repo import Repo

from gitjsondb import Database

DatabaseFactory = Callable[[str], Database]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GITJSONDB_AUTHOR_NAME",
        "GITJSONDB_AUTHOR_EMAIL",
        "GITJSONDB_DEBUG",
        "GITJSONDB_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def rsa_key() -> paramiko.RSAKey:
    """Generate one RSA key shared by the SSH credential tests."""
    return paramiko.RSAKey.generate(2048)


@pytest.fixture
def bare_remote(tmp_path: Path) -> Path:
    """Create an empty bare repository to act as the remote."""
    remote_path = tmp_path / "remote.git"
    Repo.init_bare(str(remote_path), mkdir=True).close()
    return remote_path


@pytest.fixture
def make_database(tmp_path: Path, bare_remote: Path) -> DatabaseFactory:
    """Return a factory creating clients of bare_remote in separate directories."""

    def _make(name: str) -> Database:
        db = Database(str(bare_remote), tmp_path / name)
        db.set_user("Test User", "test@example.com")
        return db

    return _make
