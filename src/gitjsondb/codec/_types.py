"""Codec capability protocol and transform types."""

from collections.abc import Callable
from enum import Enum
from typing import Final, Literal, Protocol, runtime_checkable


@runtime_checkable
class Marshaler(Protocol):
    """Capability for values that produce their own JSON encoding.

    The codec prefers this over generic structural serialization when an
    element implements it.

    Example:
        >>> class Point:
        ...     def __init__(self, x: int, y: int) -> None:
        ...         self.x, self.y = x, y
        ...
        ...     def marshal_json(self) -> bytes:
        ...         return b"[%d,%d]" % (self.x, self.y)
    """

    def marshal_json(self) -> bytes:
        """Encode this value as JSON.

        Returns:
            The JSON encoding as bytes.
        """
        ...


class _Omit(Enum):
    OMIT = "omit"

    def __repr__(self) -> str:
        return "OMIT"


# Returned by a transform to drop the element from the encoded collection
OMIT: Final = _Omit.OMIT

type Omit = Literal[_Omit.OMIT]

type Transform[T] = Callable[[T], T | Omit]
