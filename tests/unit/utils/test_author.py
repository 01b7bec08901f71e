"""Unit tests for author resolution."""

import pytest

from gitjsondb.utils import AuthorInfo, get_author_info


class TestGetAuthorInfo:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITJSONDB_AUTHOR_NAME", "Ann")
        monkeypatch.setenv("GITJSONDB_AUTHOR_EMAIL", "ann@x.io")

        assert get_author_info() == AuthorInfo(name="Ann", email="ann@x.io")

    def test_missing_environment_gives_none(self) -> None:
        assert get_author_info() == AuthorInfo(name=None, email=None)

    def test_empty_values_are_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITJSONDB_AUTHOR_NAME", "")

        assert get_author_info().name is None


class TestFormatSignature:
    def test_full_identity(self) -> None:
        assert AuthorInfo(name="Ann", email="ann@x.io").format_signature() == (
            b"Ann <ann@x.io>"
        )

    def test_partial_identity_uses_defaults(self) -> None:
        assert AuthorInfo(name="Ann", email=None).format_signature() == (
            b"Ann <gitjsondb@localhost>"
        )
