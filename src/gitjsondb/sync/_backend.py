# ruff: noqa: TC003  # Path and Repo needed at runtime for method annotations
"""Dulwich-backed version control primitives.

This module provides DulwichBackend, the default VcsBackend. It normalizes
the conditions the synchronization engine treats as steady states (empty
remote, existing clone) into typed exceptions, and wraps transport failures
in RemoteError.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Final

import paramiko
from dulwich import porcelain
from dulwich.client import GitClient, SSHGitClient, get_transport_and_path
from dulwich.errors import GitProtocolError, NotGitRepository
from dulwich.index import build_file_from_blob, index_entry_from_stat
from dulwich.object_store import iter_tree_contents
from dulwich.objects import ZERO_SHA, Blob, S_ISGITLINK
from dulwich.repo import Repo

from gitjsondb.exceptions import (
    EmptyRemoteError,
    PathNotFoundError,
    ReferenceNotFoundError,
    RemoteError,
    RepositoryExistsError,
    RepositoryNotFoundError,
)
from gitjsondb.sync._credential import SSHCredential

# Failures raised by dulwich transports and local remotes
_TRANSPORT_ERRORS: Final = (
    GitProtocolError,
    NotGitRepository,
    paramiko.SSHException,
    OSError,
)

_HEADS: Final = b"refs/heads/"


def _branch_ref(branch: str) -> bytes:
    return _HEADS + branch.encode()


def _tracking_ref(remote_name: str, branch: str) -> bytes:
    return f"refs/remotes/{remote_name}/{branch}".encode()


def _connect(url: str, credential: SSHCredential | None) -> tuple[GitClient, str]:
    client, remote_path = get_transport_and_path(url)
    # Only SSH transports take a key; local and HTTP remotes ignore the credential
    if credential is not None and isinstance(client, SSHGitClient):
        client.ssh_vendor = credential.vendor()
    return client, remote_path


def _remote_url(repo: Repo, remote_name: str) -> str:
    try:
        url: bytes = repo.get_config().get((b"remote", remote_name.encode()), b"url")
    except KeyError as e:
        msg = f"Remote {remote_name} is not configured"
        raise RemoteError(msg, remote=remote_name, cause=e) from e
    return url.decode()


def _prune_empty_dirs(root: Path, directory: Path) -> None:
    while directory != root and directory.is_dir() and not any(directory.iterdir()):
        directory.rmdir()
        directory = directory.parent


def _worktree(repo: Repo) -> Path:
    return Path(repo.path).resolve()


class DulwichBackend:
    """VcsBackend implementation on top of dulwich.

    Repositories are returned open; callers close them (dulwich Repo is a
    context manager).
    """

    __slots__ = ()

    # =========================================================================
    # Bootstrap
    # =========================================================================

    def clone(
        self,
        url: str,
        path: Path,
        *,
        remote_name: str,
        credential: SSHCredential | None = None,
    ) -> Repo:
        """Clone the remote into path.

        The remote refs are listed first so an empty remote is reported before
        anything is created on disk.

        Args:
            url: Remote URL or path.
            path: Local working tree path.
            remote_name: Name to register the remote under.
            credential: Optional SSH credential.

        Returns:
            The cloned repository.

        Raises:
            RepositoryExistsError: If path already holds a repository.
            EmptyRemoteError: If the remote has no refs.
            RemoteError: If the transport fails.
        """
        if (path / ".git").exists():
            msg = f"Repository already exists at {path}"
            raise RepositoryExistsError(msg, path=path)

        if not self._remote_refs(url, credential):
            msg = f"Remote repository is empty: {url}"
            raise EmptyRemoteError(msg, remote=url)

        try:
            client, remote_path = _connect(url, credential)
            return client.clone(
                remote_path, str(path), mkdir=not path.exists(), origin=remote_name
            )
        except _TRANSPORT_ERRORS as e:
            msg = f"Failed to clone {url}: {e}"
            raise RemoteError(msg, remote=url, operation="clone", cause=e) from e

    def init(self, path: Path, *, branch: str) -> Repo:
        """Initialize an empty repository with HEAD on branch.

        Args:
            path: Local working tree path, created if missing.
            branch: Branch HEAD should point at.

        Returns:
            The new repository.
        """
        path.mkdir(parents=True, exist_ok=True)
        repo = Repo.init(str(path))
        repo.refs.set_symbolic_ref(b"HEAD", _branch_ref(branch))
        return repo

    def open(self, path: Path) -> Repo:
        """Open an existing repository.

        Args:
            path: Local working tree path.

        Returns:
            The repository.

        Raises:
            RepositoryNotFoundError: If path holds no repository.
        """
        try:
            return Repo(str(path))
        except NotGitRepository as e:
            msg = f"No git repository at {path}"
            raise RepositoryNotFoundError(msg, path=path) from e

    def add_remote(self, repo: Repo, name: str, url: str) -> None:
        """Register a remote with the default fetch refspec.

        Args:
            repo: The repository.
            name: Remote name.
            url: Remote URL or path.
        """
        config = repo.get_config()
        section = (b"remote", name.encode())
        config.set(section, b"url", url.encode())
        config.set(section, b"fetch", f"+refs/heads/*:refs/remotes/{name}/*".encode())
        config.write_to_path()

    # =========================================================================
    # Transport
    # =========================================================================

    def _remote_refs(
        self, url: str, credential: SSHCredential | None
    ) -> dict[bytes, bytes]:
        """List the refs advertised by a remote.

        Args:
            url: Remote URL or path.
            credential: Optional SSH credential.

        Returns:
            Mapping of ref name to SHA; empty for a remote without commits.

        Raises:
            RemoteError: If the transport fails.
        """
        try:
            client, remote_path = _connect(url, credential)
            result = client.get_refs(remote_path)
        except _TRANSPORT_ERRORS as e:
            msg = f"Failed to list refs of {url}: {e}"
            raise RemoteError(msg, remote=url, operation="ls-remote", cause=e) from e
        # Newer dulwich wraps the mapping in an LsRemoteResult
        refs: dict[bytes, bytes | None] = getattr(result, "refs", result)
        return {name: sha for name, sha in refs.items() if sha}

    def fetch(
        self, repo: Repo, remote_name: str, *, credential: SSHCredential | None = None
    ) -> None:
        """Fetch the remote.

        Remote-tracking refs are overwritten with whatever the remote
        advertises, so the fetch is always forced.

        Args:
            repo: The repository.
            remote_name: Registered remote name.
            credential: Optional SSH credential.

        Raises:
            EmptyRemoteError: If the remote has no refs.
            RemoteError: If the remote is not configured or the transport fails.
        """
        url = _remote_url(repo, remote_name)
        try:
            client, remote_path = _connect(url, credential)
            result = client.fetch(remote_path, repo)
        except _TRANSPORT_ERRORS as e:
            msg = f"Failed to fetch {remote_name}: {e}"
            raise RemoteError(
                msg, remote=remote_name, operation="fetch", cause=e
            ) from e

        refs: dict[bytes, bytes | None] = getattr(result, "refs", None) or {}
        if not any(refs.values()):
            msg = f"Remote repository is empty: {remote_name}"
            raise EmptyRemoteError(msg, remote=remote_name)

        for name, remote_sha in refs.items():
            if remote_sha and name.startswith(_HEADS):
                branch = name.removeprefix(_HEADS).decode()
                repo.refs[_tracking_ref(remote_name, branch)] = remote_sha

    def push(
        self,
        repo: Repo,
        remote_name: str,
        branch: str,
        *,
        credential: SSHCredential | None = None,
    ) -> None:
        """Push branch and move its remote-tracking ref to the pushed commit.

        Pushing a branch the remote already has is not an error. A remote
        branch that is not an ancestor of the local one is never overwritten.

        Args:
            repo: The repository.
            remote_name: Registered remote name.
            branch: Branch to push.
            credential: Optional SSH credential.

        Raises:
            ReferenceNotFoundError: If the local branch has no commits.
            RemoteError: If the transport fails, the branches have diverged,
                or the remote rejects the ref.
        """
        ref = _branch_ref(branch)
        try:
            local_sha = repo.refs[ref]
        except KeyError as e:
            msg = f"Branch {branch} has no commits to push"
            raise ReferenceNotFoundError(msg, ref=ref.decode()) from e

        url = _remote_url(repo, remote_name)

        def update_refs(refs: dict[bytes, bytes]) -> dict[bytes, bytes]:
            remote_sha = refs.get(ref)
            if (
                remote_sha
                and remote_sha not in (ZERO_SHA, local_sha)
                and not self._is_ancestor(repo, remote_sha, local_sha)
            ):
                msg = f"Remote {remote_name} has diverged from {branch}"
                raise RemoteError(msg, remote=remote_name, operation="push")
            new_refs = dict(refs)
            new_refs[ref] = local_sha
            return new_refs

        try:
            client, remote_path = _connect(url, credential)
            result = client.send_pack(
                remote_path, update_refs, generate_pack_data=repo.generate_pack_data
            )
        except _TRANSPORT_ERRORS as e:
            msg = f"Failed to push {branch} to {remote_name}: {e}"
            raise RemoteError(msg, remote=remote_name, operation="push", cause=e) from e

        ref_status: dict[bytes, str | None] = getattr(result, "ref_status", None) or {}
        if error := ref_status.get(ref):
            msg = f"Remote {remote_name} rejected {branch}: {error}"
            raise RemoteError(msg, remote=remote_name, operation="push")

        repo.refs[_tracking_ref(remote_name, branch)] = local_sha

    # =========================================================================
    # References
    # =========================================================================

    def resolve_ref(self, repo: Repo, remote_name: str, branch: str) -> str:
        """Resolve the remote-tracking ref of branch.

        Args:
            repo: The repository.
            remote_name: Registered remote name.
            branch: Branch name.

        Returns:
            The commit SHA hex string.

        Raises:
            ReferenceNotFoundError: If the ref does not exist.
        """
        ref = _tracking_ref(remote_name, branch)
        try:
            return repo.refs[ref].decode("ascii")
        except KeyError as e:
            msg = f"Reference not found: {ref.decode()}"
            raise ReferenceNotFoundError(msg, ref=ref.decode()) from e

    def checkout(self, repo: Repo, branch: str) -> None:
        """Point HEAD at the local branch.

        The branch does not need to exist yet; a following hard_reset
        creates it.

        Args:
            repo: The repository.
            branch: Branch name.
        """
        repo.refs.set_symbolic_ref(b"HEAD", _branch_ref(branch))

    def head(self, repo: Repo) -> str | None:
        """Get the HEAD commit SHA.

        Args:
            repo: The repository.

        Returns:
            The SHA hex string, or None if no commits exist.
        """
        try:
            return repo.head().decode("ascii")
        except KeyError:
            # No commits yet (empty repository)
            return None

    def walk_ancestors(self, repo: Repo, sha: str) -> Iterator[str]:
        """Yield sha and its ancestors in pre-order.

        Each commit is yielded before its parents, first parent first, and
        every commit at most once. Callers may stop iterating at any point.

        Args:
            repo: The repository.
            sha: Starting commit SHA hex string.

        Yields:
            Commit SHA hex strings.
        """
        stack: list[bytes] = [sha.encode("ascii")]
        seen: set[bytes] = set()
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            yield current.decode("ascii")
            parents: list[bytes] = getattr(repo[current], "parents", [])
            stack.extend(reversed(parents))

    def _is_ancestor(self, repo: Repo, ancestor: bytes, sha: bytes) -> bool:
        if ancestor not in repo.object_store:
            return False
        target = ancestor.decode("ascii")
        return any(
            current == target
            for current in self.walk_ancestors(repo, sha.decode("ascii"))
        )

    # =========================================================================
    # Working Tree
    # =========================================================================

    def hard_reset(self, repo: Repo, sha: str) -> None:
        """Move HEAD to sha and overwrite the index and working tree.

        Tracked files absent from the target tree are deleted; every file in
        the target tree is rewritten from its blob. Untracked files outside
        the target tree are left alone.

        Args:
            repo: The repository.
            sha: Target commit SHA hex string.
        """
        root = _worktree(repo)
        commit_sha = sha.encode("ascii")
        tree_sha: bytes = getattr(repo[commit_sha], "tree", b"")
        entries = list(iter_tree_contents(repo.object_store, tree_sha))
        target_paths = {entry.path for entry in entries}

        index = repo.open_index()
        try:
            for stale in set(index) - target_paths:
                stale_path = root / os.fsdecode(stale)
                stale_path.unlink(missing_ok=True)
                _prune_empty_dirs(root, stale_path.parent)
                del index[stale]

            for entry in entries:
                if S_ISGITLINK(entry.mode):
                    continue
                blob = repo[entry.sha]
                if not isinstance(blob, Blob):
                    continue
                target = root / os.fsdecode(entry.path)
                target.parent.mkdir(parents=True, exist_ok=True)
                stat_info = build_file_from_blob(blob, entry.mode, os.fsencode(target))
                index[entry.path] = index_entry_from_stat(
                    stat_info, entry.sha, mode=entry.mode
                )
        finally:
            index.write()

        repo.refs[b"HEAD"] = commit_sha

    def stage(self, repo: Repo, path: str) -> None:
        """Stage a root-relative path.

        A missing path that is still tracked stages its removal.

        Args:
            repo: The repository.
            path: Path relative to the working tree root.

        Raises:
            PathNotFoundError: If path neither exists nor is tracked.
        """
        root = _worktree(repo)
        target = root / path
        if not target.exists():
            index = repo.open_index()
            key = os.fsencode(Path(path).as_posix())
            if key not in index:
                msg = f"Path does not exist: {path}"
                raise PathNotFoundError(msg, path=target)
            del index[key]
            index.write()
            return

        _ = porcelain.add(repo, paths=[str(target)])

    def is_clean(self, repo: Repo) -> bool:
        """Check whether nothing is staged for commit.

        Args:
            repo: The repository.

        Returns:
            True if the index matches HEAD.
        """
        if self.head(repo) is None:
            return len(repo.open_index()) == 0

        raw = porcelain.status(repo)
        staged_dict = raw.staged  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        return not any(
            staged_dict.get(change_type)  # pyright: ignore[reportUnknownMemberType]
            for change_type in ("add", "delete", "modify")
        )

    def commit(self, repo: Repo, message: str, *, author: bytes) -> str:
        """Commit the index.

        Args:
            repo: The repository.
            message: Commit message.
            author: Author and committer identity in "Name <email>" format.

        Returns:
            The new commit SHA hex string.
        """
        commit_sha: bytes = porcelain.commit(
            repo,
            message=message.encode(),
            author=author,
            committer=author,
        )
        return commit_sha.decode("ascii")
