# ruff: noqa: TC003  # Path and Repo needed at runtime for method annotations
"""Repository handle owning the synchronization lifecycle.

This module provides Database, the entry point of gitjsondb. A Database pairs
a local working tree with a remote branch and exposes the lifecycle
operations (init, force_update, add, commit, push) plus factories for the
document handles stored in the tree.

Lifecycle:
    Unbootstrapped -> init -> Bootstrapped -> force_update -> Synced
    -> add/commit -> Synced+ahead -> push -> Synced
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self

from dulwich.repo import Repo

from gitjsondb.config import DatabaseConfiguration
from gitjsondb.exceptions import (
    EmptyRemoteError,
    ReferenceNotFoundError,
    RepositoryExistsError,
)
from gitjsondb.store import Collection, Object
from gitjsondb.sync._backend import DulwichBackend
from gitjsondb.sync._credential import SSHCredential
from gitjsondb.sync._models import CommitResult
from gitjsondb.sync._protocol import VcsBackend

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

DEFAULT_COMMIT_MESSAGE: Final = "update"

# Length of the abbreviated SHA used in log output
_SHORT_SHA_LENGTH: Final = 8


class Database:
    """A JSON document database backed by a git working tree.

    The handle is configured through its setters before use and is not safe
    to share across threads. Each operation opens the repository and closes
    it before returning; document handles hold no repository state at all.

    Example:
        >>> db = Database("git@example.com:acme/data.git", "/var/lib/data")
        >>> db.set_ssh_key("git", key_bytes)
        >>> db.init()
        >>> db.force_update()
        >>> db.object("settings.json").write({"theme": "dark"})
        >>> db.add("settings.json")
        >>> db.commit("set theme")
        >>> db.push()
    """

    __slots__: Final = ("_backend", "_config", "_credential", "_logger")

    def __init__(
        self,
        remote: str,
        local: Path | str,
        *,
        config: DatabaseConfiguration | None = None,
        backend: VcsBackend | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Initialize the handle.

        Nothing touches the filesystem or the network until init() is called.

        Args:
            remote: URL or path of the remote repository.
            local: Path of the local working tree.
            config: Full configuration; when given, remote and local override
                its fields. Defaults to DatabaseConfiguration.from_env.
            backend: Version control backend. Defaults to DulwichBackend.
            logger: Optional logger for lifecycle events.
        """
        if config is None:
            config = DatabaseConfiguration.from_env(remote, local)
        else:
            config = config.replace(remote=remote, local=Path(local))
        self._config: DatabaseConfiguration = config
        self._backend: VcsBackend = backend if backend is not None else DulwichBackend()
        self._credential: SSHCredential | None = None
        self._logger: FilteringBoundLogger | None = logger

    @classmethod
    def from_config(
        cls,
        config: DatabaseConfiguration,
        *,
        backend: VcsBackend | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> Self:
        """Create a handle from a configuration.

        Args:
            config: The configuration.
            backend: Version control backend. Defaults to DulwichBackend.
            logger: Optional logger for lifecycle events.

        Returns:
            A new Database.
        """
        return cls(
            config.remote, config.local, config=config, backend=backend, logger=logger
        )

    def __repr__(self) -> str:
        return f"Database(remote={self.remote!r}, local={str(self.local)!r})"

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def config(self) -> DatabaseConfiguration:
        """The current configuration."""
        return self._config

    @property
    def remote(self) -> str:
        """URL or path of the remote repository."""
        return self._config.remote

    @property
    def local(self) -> Path:
        """Path of the local working tree."""
        return self._config.local

    @property
    def remote_name(self) -> str:
        """Name the remote is registered under."""
        return self._config.remote_name

    @property
    def branch_name(self) -> str:
        """Branch that is fetched, reset to and pushed."""
        return self._config.branch_name

    def set_remote(self, remote: str) -> None:
        """Set the remote URL or path."""
        self._config = self._config.replace(remote=remote)

    def set_local(self, local: Path | str) -> None:
        """Set the local working tree path."""
        self._config = self._config.replace(local=Path(local))

    def set_remote_name(self, name: str) -> None:
        """Set the remote name. An empty name restores the default."""
        self._config = self._config.replace(remote_name=name)

    def set_branch_name(self, name: str) -> None:
        """Set the branch name. An empty name restores the default."""
        self._config = self._config.replace(branch_name=name)

    def set_user(self, name: str, email: str) -> None:
        """Set the commit author identity.

        Args:
            name: Author name.
            email: Author email.
        """
        self._config = self._config.replace(author_name=name, author_email=email)

    def set_ssh_key(
        self, user: str, private_key: bytes, passphrase: str | None = None
    ) -> None:
        """Authenticate remote operations with an SSH private key.

        Args:
            user: SSH user name.
            private_key: Private key file contents.
            passphrase: Passphrase for an encrypted key.

        Raises:
            CredentialError: If the key cannot be parsed.
        """
        self._credential = SSHCredential.from_private_key(user, private_key, passphrase)

    # =========================================================================
    # Document Handles
    # =========================================================================

    def object(self, path: str, wrapper: str = "") -> Object:
        """Get a handle for a single-record document.

        Args:
            path: Document path relative to the local root.
            wrapper: Optional JSONP callback name used when writing.

        Returns:
            The document handle.
        """
        return Object(self.local, path, wrapper=wrapper, logger=self._logger)

    def collection(self, path: str, wrapper: str = "") -> Collection:
        """Get a handle for an array-shaped document.

        Args:
            path: Document path relative to the local root.
            wrapper: Optional JSONP callback name used when writing.

        Returns:
            The document handle.
        """
        return Collection(self.local, path, wrapper=wrapper, logger=self._logger)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @contextmanager
    def _open(self) -> Iterator[Repo]:
        repo = self._backend.open(self.local)
        try:
            yield repo
        finally:
            repo.close()

    def init(self) -> None:
        """Bootstrap the local working tree.

        Clones the remote. An empty remote initializes a fresh repository
        with HEAD on the configured branch and the remote registered, ready
        for a first push. An existing repository at the local path is opened
        instead. Calling init repeatedly is safe.

        Raises:
            RemoteError: If the remote cannot be reached.
        """
        if self._logger:
            self._logger.info(
                "initializing", remote=self.remote, local=str(self.local)
            )

        try:
            repo = self._backend.clone(
                self.remote,
                self.local,
                remote_name=self.remote_name,
                credential=self._credential,
            )
        except RepositoryExistsError:
            repo = self._backend.open(self.local)
            if self._logger:
                self._logger.info("opened existing repository", local=str(self.local))
        except EmptyRemoteError:
            repo = self._backend.init(self.local, branch=self.branch_name)
            self._backend.add_remote(repo, self.remote_name, self.remote)
            if self._logger:
                self._logger.info(
                    "init", local=str(self.local), branch=self.branch_name
                )
        repo.close()

    def force_update(self) -> None:
        """Converge the local branch to the remote branch.

        Fetches the remote and hard-resets the branch, index and working
        tree to the remote tip. Uncommitted edits and unpushed commits are
        discarded. An empty remote leaves the tree untouched.

        Raises:
            RepositoryNotFoundError: If init() has not been run.
            ReferenceNotFoundError: If the remote has no such branch.
            RemoteError: If the fetch fails.
        """
        with self._open() as repo:
            if self._logger:
                self._logger.info("fetching", remote=self.remote_name)
            try:
                self._backend.fetch(repo, self.remote_name, credential=self._credential)
            except EmptyRemoteError:
                if self._logger:
                    self._logger.info("remote is empty", remote=self.remote_name)
                return

            sha = self._backend.resolve_ref(repo, self.remote_name, self.branch_name)
            self._backend.checkout(repo, self.branch_name)
            self._backend.hard_reset(repo, sha)
            if self._logger:
                self._logger.info(
                    "reset", branch=self.branch_name, sha=sha[:_SHORT_SHA_LENGTH]
                )

    def add(self, *paths: str) -> None:
        """Stage paths relative to the local root.

        A path that no longer exists but is still tracked stages its removal.

        Args:
            *paths: Paths relative to the local root.

        Raises:
            PathNotFoundError: If a path neither exists nor is tracked.
        """
        with self._open() as repo:
            for path in paths:
                self._backend.stage(repo, path)
                if self._logger:
                    self._logger.debug("staged", path=path)

    def commit(self, message: str | None = None) -> CommitResult:
        """Commit staged changes.

        Args:
            message: Commit message. Defaults to "update".

        Returns:
            CommitResult with the new SHA, or no_changes=True if nothing was
            staged.
        """
        message = message or DEFAULT_COMMIT_MESSAGE
        with self._open() as repo:
            if self._backend.is_clean(repo):
                if self._logger:
                    self._logger.info("nothing to commit")
                return CommitResult(sha=None, message=message, no_changes=True)

            sha = self._backend.commit(
                repo, message, author=self._config.author.format_signature()
            )

        if self._logger:
            self._logger.info(
                "added commit", sha=sha[:_SHORT_SHA_LENGTH], message=message
            )
        return CommitResult(sha=sha, message=message, no_changes=False)

    def push(self) -> None:
        """Push the configured branch to the remote.

        Raises:
            ReferenceNotFoundError: If the branch has no commits.
            RemoteError: If the push fails or is rejected.
        """
        with self._open() as repo:
            if self._logger:
                self._logger.info(
                    "pushing", remote=self.remote_name, branch=self.branch_name
                )
            self._backend.push(
                repo, self.remote_name, self.branch_name, credential=self._credential
            )

    def unpushed_commits(self) -> list[str]:
        """List local commits the remote branch does not have.

        Walks from HEAD towards the root and stops at the remote-tracking
        tip. Without a remote-tracking ref every commit reachable from HEAD
        is reported.

        Returns:
            Commit SHA hex strings, newest first.
        """
        with self._open() as repo:
            head = self._backend.head(repo)
            if head is None:
                return []

            try:
                remote_tip: str | None = self._backend.resolve_ref(
                    repo, self.remote_name, self.branch_name
                )
            except ReferenceNotFoundError:
                remote_tip = None

            commits: list[str] = []
            for sha in self._backend.walk_ancestors(repo, head):
                if sha == remote_tip:
                    break
                commits.append(sha)
            return commits
