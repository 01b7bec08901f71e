# ruff: noqa: TC003  # Path and Callable needed at runtime for annotations
"""Shared document handle behavior.

This module provides the base class for path-addressed documents stored as
files under a local working tree.
"""

from collections.abc import Callable
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from gitjsondb.exceptions import DocumentWriteError, EncodeError

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


class Document:
    """Base class for document handles.

    A handle is a lightweight pointer to one file relative to the local
    root. It holds no open resources; the backing file is the only state.

    Attributes:
        path: The document path relative to the local root.
        wrapper: JSONP callback name used when writing, or empty for bare
            JSON.
    """

    __slots__ = ("_logger", "_root", "path", "wrapper")

    def __init__(
        self,
        root: Path,
        path: str | PurePosixPath,
        *,
        wrapper: str = "",
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Initialize the handle.

        Args:
            root: The local working tree root.
            path: The document path relative to root.
            wrapper: Optional JSONP callback name.
            logger: Optional logger for debug-level operation logging.
        """
        self._root = root
        self.path = PurePosixPath(path)
        self.wrapper = wrapper
        self._logger = logger

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r}, wrapper={self.wrapper!r})"

    @property
    def file_path(self) -> Path:
        """Absolute path of the backing file."""
        return self._root / self.path

    def exists(self) -> bool:
        """Check whether the backing file exists.

        Returns:
            True if the document has been written.
        """
        return self.file_path.is_file()

    def _write(self, encode: Callable[[], bytes]) -> None:
        """Encode and write the document.

        Encoding completes before the file is opened, so a failed encode
        leaves the existing file untouched. The write itself truncates and
        rewrites the file in place.

        Args:
            encode: Produces the encoded document.

        Raises:
            DocumentWriteError: If a transform or marshal hook fails.
        """
        target = self.file_path
        try:
            payload = encode()
        except EncodeError as e:
            msg = f"Failed to write {self.path}: {e}"
            raise DocumentWriteError(msg, path=target, cause=e) from e

        target.parent.mkdir(parents=True, exist_ok=True)
        _ = target.write_bytes(payload)

        if self._logger:
            self._logger.debug("document_write", path=str(self.path), size=len(payload))
