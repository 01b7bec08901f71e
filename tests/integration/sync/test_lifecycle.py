"""Integration tests for the Database lifecycle against a local bare remote."""

import io
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import paramiko
import pytest
from dulwich.contrib.paramiko_vendor import ParamikoSSHVendor
from dulwich.repo import Repo

from gitjsondb import OMIT, Database
from gitjsondb.exceptions import (
    PathNotFoundError,
    RemoteError,
    RepositoryNotFoundError,
)

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

DatabaseFactory = Callable[[str], Database]


def _remote_sections(db: Database) -> list[tuple[bytes, ...]]:
    with Repo(str(db.local)) as repo:
        return [s for s in repo.get_config().sections() if s[0] == b"remote"]


def _publish(db: Database, path: str, content: object, message: str) -> str:
    db.object(path).write(content)
    db.add(path)
    result = db.commit(message)
    assert result.sha is not None
    db.push()
    return result.sha


class TestEndToEnd:
    def test_second_client_sees_pushed_object(self, make_database: DatabaseFactory) -> None:
        first = make_database("first")
        first.init()
        first.object("x.json").write({"v": 1})
        first.add("x.json")
        result = first.commit("first")
        first.push()

        assert not result.no_changes
        assert first.unpushed_commits() == []

        second = make_database("second")
        second.init()
        second.force_update()

        assert second.object("x.json").read() == {"v": 1}

    def test_collection_round_trip_through_remote(
        self, make_database: DatabaseFactory
    ) -> None:
        first = make_database("first")
        first.init()
        first.collection("users.js", wrapper="loadUsers").write(
            [{"name": "ann"}, {"name": "bob"}, {"name": "eve"}],
            lambda user: OMIT if user["name"] == "eve" else user,
        )
        first.add("users.js")
        _ = first.commit()
        first.push()

        second = make_database("second")
        second.init()
        second.force_update()

        assert second.collection("users.js").read() == [{"name": "ann"}, {"name": "bob"}]

    def test_commit_uses_configured_author(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")
        db.init()
        sha = _publish(db, "a.json", 1, "msg")

        with Repo(str(db.local)) as repo:
            commit = repo[sha.encode()]
            assert commit.author == b"Test User <test@example.com>"  # pyright: ignore[reportAttributeAccessIssue]
            assert commit.message == b"msg"  # pyright: ignore[reportAttributeAccessIssue]


class TestInit:
    def test_init_twice_on_empty_remote(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")

        db.init()
        db.init()

        assert _remote_sections(db) == [(b"remote", b"origin")]

    def test_init_twice_on_populated_remote(self, make_database: DatabaseFactory) -> None:
        seed = make_database("seed")
        seed.init()
        _ = _publish(seed, "a.json", 1, "seed")

        db = make_database("db")
        db.init()
        db.init()

        assert _remote_sections(db) == [(b"remote", b"origin")]
        assert db.object("a.json").read() == 1

    def test_init_uses_configured_remote_name(
        self, make_database: DatabaseFactory
    ) -> None:
        db = make_database("db")
        db.set_remote_name("upstream")

        db.init()

        assert _remote_sections(db) == [(b"remote", b"upstream")]

    def test_operations_before_init_raise(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")
        db.local.mkdir()

        with pytest.raises(RepositoryNotFoundError):
            db.force_update()


class TestForceUpdate:
    def test_empty_remote_is_noop(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")
        db.init()
        db.object("draft.json").write({"draft": True})

        db.force_update()

        assert db.object("draft.json").read() == {"draft": True}

    def test_discards_local_edits_and_unpushed_commits(
        self, make_database: DatabaseFactory
    ) -> None:
        db = make_database("db")
        db.init()
        pushed = _publish(db, "x.json", {"v": 1}, "first")

        db.object("x.json").write({"v": 2})
        db.add("x.json")
        _ = db.commit("local only")
        db.object("x.json").write({"v": 3})
        db.object("new.json").write(1)
        db.add("new.json")

        db.force_update()

        assert db.object("x.json").read() == {"v": 1}
        assert not db.object("new.json").exists()
        assert db.unpushed_commits() == []
        with Repo(str(db.local)) as repo:
            assert repo.head() == pushed.encode()

    def test_pulls_changes_from_other_client(self, make_database: DatabaseFactory) -> None:
        first = make_database("first")
        first.init()
        _ = _publish(first, "x.json", {"v": 1}, "one")

        second = make_database("second")
        second.init()
        second.force_update()
        _ = _publish(second, "x.json", {"v": 2}, "two")

        first.force_update()

        assert first.object("x.json").read() == {"v": 2}


class TestCommit:
    def test_clean_tree_creates_no_commit(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")
        db.init()
        sha = _publish(db, "a.json", 1, "first")

        result = db.commit()

        assert result.no_changes
        with Repo(str(db.local)) as repo:
            assert repo.head() == sha.encode()

    def test_commit_on_fresh_repository_is_noop(
        self, make_database: DatabaseFactory
    ) -> None:
        db = make_database("db")
        db.init()

        assert db.commit().no_changes

    def test_add_missing_path_raises(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")
        db.init()

        with pytest.raises(PathNotFoundError):
            db.add("missing.json")

    def test_delete_can_be_committed_and_pushed(
        self, make_database: DatabaseFactory
    ) -> None:
        first = make_database("first")
        first.init()
        _ = _publish(first, "x.json", {"v": 1}, "add")

        first.object("x.json").delete()
        first.add("x.json")
        result = first.commit("remove")
        first.push()

        assert not result.no_changes

        second = make_database("second")
        second.init()
        second.force_update()
        assert not second.object("x.json").exists()


class TestUnpushedCommits:
    def test_fresh_repository_has_none(self, make_database: DatabaseFactory) -> None:
        db = make_database("db")
        db.init()

        assert db.unpushed_commits() == []

    def test_lists_local_commits_newest_first(
        self, make_database: DatabaseFactory
    ) -> None:
        db = make_database("db")
        db.init()
        _ = _publish(db, "a.json", 1, "pushed")

        shas: list[str] = []
        for value in (2, 3):
            db.object("a.json").write(value)
            db.add("a.json")
            result = db.commit(f"local {value}")
            assert result.sha is not None
            shas.append(result.sha)

        assert db.unpushed_commits() == list(reversed(shas))

        db.push()

        assert db.unpushed_commits() == []

    def test_never_pushed_lists_every_commit(
        self, make_database: DatabaseFactory
    ) -> None:
        db = make_database("db")
        db.init()
        db.object("a.json").write(1)
        db.add("a.json")
        result = db.commit()

        assert db.unpushed_commits() == [result.sha]


def test_local_path_is_independent_of_cwd(
    make_database: DatabaseFactory, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    db = make_database("db")
    db.init()

    _ = _publish(db, "nested/doc.json", {"ok": True}, "nested")

    assert db.unpushed_commits() == []


def test_ssh_key_reaches_transport(
    tmp_path: Path,
    rsa_key: paramiko.RSAKey,
    mocker: "MockerFixture",  # noqa: UP037
) -> None:
    run_command = mocker.patch.object(
        ParamikoSSHVendor,
        "run_command",
        autospec=True,
        side_effect=OSError("connection refused"),
    )
    buffer = io.StringIO()
    rsa_key.write_private_key(buffer)
    db = Database("ssh://git@127.0.0.1:1/data.git", tmp_path / "db")
    db.set_ssh_key("git", buffer.getvalue().encode())

    with pytest.raises(RemoteError):
        db.init()

    vendor, host = run_command.call_args.args[:2]
    assert host == "127.0.0.1"
    assert vendor.kwargs["username"] == "git"
    assert vendor.kwargs["pkey"].get_fingerprint() == rsa_key.get_fingerprint()
