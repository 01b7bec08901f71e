"""Array-shaped document handle."""

from collections.abc import Iterable
from typing import Any, overload

from gitjsondb.codec import Transform, decode_many, encode_many
from gitjsondb.store._document import Document


class Collection(Document):
    """A document holding an ordered sequence of records.

    Writes accept transforms that rewrite or drop each element before it is
    encoded. Reads drop null and zero-valued entries.

    Example:
        >>> users = db.collection("users.json")
        >>> users.write(
        ...     [{"name": "ann", "token": "t1"}, {"name": "bob", "token": "t2"}],
        ...     lambda user: {k: v for k, v in user.items() if k != "token"},
        ... )
        >>> users.read()
        [{'name': 'ann'}, {'name': 'bob'}]
    """

    __slots__ = ()

    @overload
    def read(
        self, item_type: None = None, *, default: list[object] | None = None
    ) -> list[object] | None: ...

    @overload
    def read[T](
        self, item_type: type[T], *, default: list[T] | None = None
    ) -> list[T] | None: ...

    def read(
        self,
        item_type: type[Any] | None = None,  # pyright: ignore[reportExplicitAny]
        *,
        default: list[Any] | None = None,  # pyright: ignore[reportExplicitAny]
    ) -> list[Any] | None:  # pyright: ignore[reportExplicitAny]
        """Read the records.

        Args:
            item_type: Optional element type to validate into.
            default: Returned unchanged when the document has not been
                written yet.

        Returns:
            The decoded records in stored order, or default.

        Raises:
            DocumentDecodeError: If the file cannot be parsed or validated.
        """
        return decode_many(self.file_path, item_type, default=default)

    def write[T](self, content: Iterable[T], *transforms: Transform[T]) -> None:
        """Replace the records.

        Args:
            content: The records to store.
            *transforms: Applied to each record in order. A transform
                returning OMIT drops the record.

        Raises:
            DocumentWriteError: If a transform raises or a record cannot be
                marshaled.
        """
        self._write(lambda: encode_many(content, *transforms, wrapper=self.wrapper))
