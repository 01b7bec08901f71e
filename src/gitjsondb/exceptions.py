# ruff: noqa: TC003  # Path needed at runtime for signature annotations
"""gitjsondb exceptions."""

from pathlib import Path


class GitDBError(Exception):
    """Base exception for gitjsondb errors."""


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryError(GitDBError):
    """Base exception for repository and synchronization errors."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when no git repository exists at the local path.

    Attributes:
        path: The directory that was expected to hold a repository.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The directory that was expected to hold a repository.
        """
        super().__init__(message)
        self.path: Path | None = path


class RepositoryExistsError(RepositoryError):
    """Raised when cloning into a path that already holds a repository.

    Attributes:
        path: The path of the existing repository.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context."""
        super().__init__(message)
        self.path: Path | None = path


class EmptyRemoteError(RepositoryError):
    """Raised when the remote repository is reachable but has no refs.

    Attributes:
        remote: The remote URL or name that was contacted.
    """

    def __init__(self, message: str, *, remote: str | None = None) -> None:
        """Initialize with error message and remote context."""
        super().__init__(message)
        self.remote: str | None = remote


class RemoteError(RepositoryError):
    """Raised when a transport operation against the remote fails.

    Attributes:
        remote: The remote URL or name that was contacted.
        operation: The operation that failed (clone, fetch, push).
        cause: The underlying exception.
    """

    def __init__(
        self,
        message: str,
        *,
        remote: str | None = None,
        operation: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and transport context.

        Args:
            message: Human-readable error message.
            remote: The remote URL or name that was contacted.
            operation: The operation that failed.
            cause: The underlying exception.
        """
        super().__init__(message)
        self.remote: str | None = remote
        self.operation: str | None = operation
        self.cause: Exception | None = cause


class ReferenceNotFoundError(RepositoryError, KeyError):
    """Raised when a git reference cannot be resolved.

    Attributes:
        ref: The reference name that was not found.
    """

    def __init__(self, message: str, *, ref: str | None = None) -> None:
        """Initialize with error message and reference context."""
        super().__init__(message)
        self.ref: str | None = ref

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class PathNotFoundError(RepositoryError, FileNotFoundError):
    """Raised when staging a path that does not exist.

    Attributes:
        path: The path that was not found.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context."""
        super().__init__(message)
        self.path: Path | None = path


class CredentialError(GitDBError, ValueError):
    """Raised when an SSH credential cannot be loaded."""


# =============================================================================
# Document Exceptions
# =============================================================================


class DocumentError(GitDBError):
    """Base exception for document encoding and decoding errors."""


class EncodeError(DocumentError):
    """Raised when a value cannot be encoded.

    Attributes:
        index: Position of the failing element in a sequence, or None for
            single values.
        cause: The underlying exception.
    """

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and element context.

        Args:
            message: Human-readable error message.
            index: Position of the failing element in a sequence.
            cause: The underlying exception.
        """
        super().__init__(message)
        self.index: int | None = index
        self.cause: Exception | None = cause


class TransformError(EncodeError):
    """Raised when a write-time transform fails on an element."""


class MarshalError(EncodeError):
    """Raised when an element cannot be marshaled to JSON."""


class DocumentWriteError(DocumentError):
    """Raised when a document cannot be written.

    Attributes:
        path: The document file path.
        cause: The underlying exception.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and document context."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause


class DocumentDecodeError(DocumentError, ValueError):
    """Raised when a document file cannot be parsed.

    Attributes:
        path: The document file path.
        cause: The underlying exception.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and document context."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause
