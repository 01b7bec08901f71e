"""Single-record document handle."""

from typing import Any, overload

from gitjsondb.codec import decode, encode_one
from gitjsondb.store._document import Document


class Object(Document):
    """A document holding exactly one record.

    Example:
        >>> settings = db.object("config/settings.json")
        >>> settings.write({"theme": "dark"})
        >>> settings.read()
        {'theme': 'dark'}
    """

    __slots__ = ()

    @overload
    def read(self, type_: None = None, *, default: object = None) -> object: ...

    @overload
    def read[T](self, type_: type[T], *, default: T | None = None) -> T | None: ...

    def read(
        self,
        type_: type[Any] | None = None,  # pyright: ignore[reportExplicitAny]
        *,
        default: object = None,
    ) -> object:
        """Read the record.

        Args:
            type_: Optional type to validate the record into, such as a
                pydantic model or dataclass.
            default: Returned unchanged when the document has not been
                written yet.

        Returns:
            The decoded record, or default.

        Raises:
            DocumentDecodeError: If the file cannot be parsed or validated.
        """
        return decode(self.file_path, type_, default=default)

    def write(self, content: object) -> None:
        """Replace the record.

        Args:
            content: The record to store.

        Raises:
            DocumentWriteError: If the record cannot be marshaled.
        """
        self._write(lambda: encode_one(content, wrapper=self.wrapper))

    def delete(self) -> None:
        """Remove the backing file.

        Raises:
            FileNotFoundError: If the document does not exist.
        """
        self.file_path.unlink()
        if self._logger:
            self._logger.debug("document_delete", path=str(self.path))
