"""Synchronization result models."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Result of a commit operation.

    Attributes:
        sha: Commit SHA hex string, None if no_changes.
        message: The commit message that was used.
        no_changes: True if nothing was staged and no commit was created.
    """

    sha: str | None
    message: str
    no_changes: bool
