# ruff: noqa: TC003  # Path and Repo needed at runtime for Protocol annotations
"""Version control backend protocol.

This module defines the primitives the synchronization engine consumes from
the underlying git implementation. The default implementation is
DulwichBackend; tests may substitute fakes or mocks.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from dulwich.repo import Repo

from gitjsondb.sync._credential import SSHCredential


@runtime_checkable
class VcsBackend(Protocol):
    """Protocol for git repository primitives.

    Commit identifiers cross this boundary as 40-character hex strings.
    """

    def clone(
        self,
        url: str,
        path: Path,
        *,
        remote_name: str,
        credential: SSHCredential | None = None,
    ) -> Repo:
        """Clone the remote into path.

        Raises:
            RepositoryExistsError: If path already holds a repository.
            EmptyRemoteError: If the remote has no refs.
            RemoteError: If the transport fails.
        """
        ...

    def init(self, path: Path, *, branch: str) -> Repo:
        """Initialize an empty repository with HEAD on branch."""
        ...

    def open(self, path: Path) -> Repo:
        """Open an existing repository.

        Raises:
            RepositoryNotFoundError: If path holds no repository.
        """
        ...

    def add_remote(self, repo: Repo, name: str, url: str) -> None:
        """Register a remote, replacing any remote of the same name."""
        ...

    def fetch(
        self, repo: Repo, remote_name: str, *, credential: SSHCredential | None = None
    ) -> None:
        """Fetch the remote, overwriting its remote-tracking refs.

        Raises:
            EmptyRemoteError: If the remote has no refs.
            RemoteError: If the transport fails.
        """
        ...

    def resolve_ref(self, repo: Repo, remote_name: str, branch: str) -> str:
        """Resolve the remote-tracking ref of branch.

        Raises:
            ReferenceNotFoundError: If the ref does not exist.
        """
        ...

    def checkout(self, repo: Repo, branch: str) -> None:
        """Point HEAD at the local branch."""
        ...

    def hard_reset(self, repo: Repo, sha: str) -> None:
        """Move HEAD to sha and overwrite the index and working tree."""
        ...

    def stage(self, repo: Repo, path: str) -> None:
        """Stage a root-relative path.

        Raises:
            PathNotFoundError: If path neither exists nor is tracked.
        """
        ...

    def is_clean(self, repo: Repo) -> bool:
        """Check whether nothing is staged for commit."""
        ...

    def commit(self, repo: Repo, message: str, *, author: bytes) -> str:
        """Commit the index and return the new commit SHA."""
        ...

    def push(
        self,
        repo: Repo,
        remote_name: str,
        branch: str,
        *,
        credential: SSHCredential | None = None,
    ) -> None:
        """Push branch to the remote and update its remote-tracking ref.

        Raises:
            RemoteError: If the transport fails or the remote rejects the ref.
        """
        ...

    def head(self, repo: Repo) -> str | None:
        """Get the HEAD commit SHA, or None if there are no commits."""
        ...

    def walk_ancestors(self, repo: Repo, sha: str) -> Iterator[str]:
        """Yield sha and its ancestors, parent-first in pre-order."""
        ...
